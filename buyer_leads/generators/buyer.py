"""Buyer lead generator."""

from __future__ import annotations

from typing import Iterator

from buyer_leads.csvio.serialization import serialize_value
from buyer_leads.generators.base import BaseGenerator
from buyer_leads.models.buyer import RECORD_COLUMNS, UserFacingRecord
from buyer_leads.models.enums import (
    BHK_REQUIRED_FOR,
    BuyerStatus,
    City,
    FormBHK,
    FormSource,
    FormTimeline,
    PropertyType,
    Purpose,
)
from buyer_leads.tags import stringify_tags


class BuyerLeadGenerator(BaseGenerator):
    """Generate synthetic buyer leads in form / CSV vocabulary.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale.
    invalid_rate : float
        Share of rows from ``generate_rows`` that are deliberately broken.
    """

    CITIES = list(City)
    CITY_WEIGHTS = [0.35, 0.25, 0.15, 0.15, 0.10]

    PROPERTY_TYPES = list(PropertyType)
    PROPERTY_WEIGHTS = [0.45, 0.15, 0.20, 0.10, 0.10]

    STATUS_WEIGHTS = [0.40, 0.15, 0.15, 0.10, 0.08, 0.07, 0.05]

    TAGS = ["hot", "investor", "first-time", "nri", "loan", "urgent", "follow-up"]

    # Budget ranges in INR by purpose
    BUDGET_RANGES = {
        Purpose.BUY: (2_000_000, 30_000_000),
        Purpose.RENT: (10_000, 150_000),
    }

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_IN",
        invalid_rate: float = 0.0,
    ) -> None:
        super().__init__(seed, locale)
        if not 0.0 <= invalid_rate <= 1.0:
            raise ValueError("invalid_rate must be between 0 and 1")
        self.invalid_rate = invalid_rate

    def generate(self) -> UserFacingRecord:
        """Generate a single valid buyer lead.

        Returns
        -------
        UserFacingRecord
            Generated lead.
        """
        return self._generate_one()

    def generate_batch(self, count: int) -> Iterator[UserFacingRecord]:
        """Generate multiple valid buyer leads.

        Parameters
        ----------
        count : int
            Number of leads to generate.

        Yields
        ------
        UserFacingRecord
            Generated leads.
        """
        for _ in range(count):
            yield self._generate_one()

    def generate_rows(self, count: int) -> Iterator[dict[str, str]]:
        """Generate CSV-ready rows keyed by column name.

        Roughly ``invalid_rate`` of the rows break one validation rule.
        """
        for _ in range(count):
            row = {
                column: serialize_value(value)
                for column, value in self._generate_one().as_columns().items()
            }
            if self.random.random() < self.invalid_rate:
                self._corrupt(row)
            yield {column: row[column] for column in RECORD_COLUMNS}

    def _generate_one(self) -> UserFacingRecord:
        property_type = self.random.choices(
            self.PROPERTY_TYPES, weights=self.PROPERTY_WEIGHTS, k=1
        )[0]
        purpose = self.random.choice(list(Purpose))

        bhk = None
        if property_type in BHK_REQUIRED_FOR:
            bhk = self.random.choice(list(FormBHK))

        budget_min = budget_max = None
        if self.random.random() < 0.8:
            low, high = self.BUDGET_RANGES[purpose]
            budget_min = self.random.randrange(low, high, 1000)
            if self.random.random() < 0.7:
                budget_max = budget_min + self.random.randrange(0, high // 2, 1000)

        tags = None
        if self.random.random() < 0.5:
            tags = stringify_tags(self.random.sample(self.TAGS, k=self.random.randint(1, 3)))

        return UserFacingRecord(
            full_name=self.fake.name(),
            phone=self._phone(),
            city=self.random.choices(self.CITIES, weights=self.CITY_WEIGHTS, k=1)[0],
            property_type=property_type,
            purpose=purpose,
            timeline=self.random.choice(list(FormTimeline)),
            email=self.fake.free_email() if self.random.random() < 0.7 else None,
            bhk=bhk,
            budget_min=budget_min,
            budget_max=budget_max,
            source=self.random.choice(list(FormSource)),
            notes=self.fake.sentence(nb_words=10) if self.random.random() < 0.3 else None,
            tags=tags,
            status=self.random.choices(list(BuyerStatus), weights=self.STATUS_WEIGHTS, k=1)[0],
        )

    def _phone(self) -> str:
        # Indian mobile numbers: 10 digits starting 6-9
        return str(self.random.randint(6, 9)) + "".join(
            str(self.random.randint(0, 9)) for _ in range(9)
        )

    def _corrupt(self, row: dict[str, str]) -> None:
        """Break exactly one rule in ``row``."""
        fault = self.random.choice(("phone", "email", "budget", "bhk", "name"))
        if fault == "phone":
            row["phone"] = "98-765"
        elif fault == "email":
            row["email"] = "not-an-email"
        elif fault == "budget":
            row["budgetMin"] = "5000000"
            row["budgetMax"] = "1000000"
        elif fault == "bhk":
            row["propertyType"] = PropertyType.APARTMENT.value
            row["bhk"] = ""
        else:
            row["fullName"] = "A"
