"""Borrower generator."""

from loan_ledger.generators.base import BaseGenerator

# Township codes used in NRC numbers, e.g. ``12/YAKANA(N)123456``.
TOWNSHIP_CODES = ["YAKANA", "MAKANA", "PAMANA", "KAMAYA", "DAGANA", "TAMANA"]


class BorrowerGenerator(BaseGenerator):
    """Generate borrower identity fields."""

    def national_id(self) -> str:
        state = self.random.randint(1, 14)
        township = self.random.choice(TOWNSHIP_CODES)
        return f"{state}/{township}(N){self.random.randint(0, 999999):06d}"

    def generate(self) -> dict[str, str]:
        """Return keyword arguments for ``BorrowerRegistry.register``."""
        full_name = self.fake.name()
        handle = full_name.lower().replace(" ", ".").replace("'", "")
        return {
            "full_name": full_name,
            "phone": f"09{self.random.randint(100000000, 999999999)}",
            "email": f"{handle}{self.random.randint(1, 999)}@{self.fake.free_email_domain()}",
            "address": self.fake.address().replace("\n", ", "),
            "national_id": self.national_id(),
        }
