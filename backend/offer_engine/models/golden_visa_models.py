"""
Golden Visa configuration models.

Fee defaults mirror the current authority schedule so a form that omits a
fee block still prices correctly.
"""
import datetime
from typing import List, Literal, Optional

from pydantic import Field

from offer_engine.config import DEFAULT_SECONDARY_CURRENCY
from offer_engine.models.common import CamelModel

GoldenVisaType = Literal["property-investment", "time-deposit", "skilled-employee"]
CompanyType = Literal["tme-fzco", "management-consultants"]

# Primary golden visa TME fee (AED)
DEFAULT_PRIMARY_TME_FEE: float = 4820.0
# Legacy dependent fees, used when no dependent authority fee block is given
DEFAULT_SPOUSE_GOVERNMENT_FEE: float = 6730.0
DEFAULT_SPOUSE_TME_FEE: float = 2240.0
DEFAULT_CHILD_GOVERNMENT_FEE: float = 5500.0
DEFAULT_CHILD_TME_FEE: float = 1690.0


class SkilledEmployeeAuthorityFees(CamelModel):
    """Authority fees for the time-deposit and skilled-employee routes."""
    professional_passport_picture: float = Field(25.0, ge=0)
    standard_authority_costs: float = Field(5010.0, ge=0)
    mandatory_uae_medical_test: float = Field(700.0, ge=0)
    emirates_id_fee: float = Field(1155.0, ge=0)
    immigration_residency_fee: float = Field(3160.0, ge=0)
    visa_cancellation: bool = Field(False, alias="visaCancelation")
    visa_cancellation_fee: float = Field(185.0, ge=0, alias="visaCancelationFee")
    third_party_costs: float = Field(1460.0, ge=0)

    @property
    def effective_standard_costs(self) -> float:
        """Standard costs, falling back to the sum of their components."""
        return (
            self.standard_authority_costs
            or (self.mandatory_uae_medical_test + self.emirates_id_fee + self.immigration_residency_fee)
            or 5010.0
        )

    @property
    def has_cancellation(self) -> bool:
        return self.visa_cancellation and self.visa_cancellation_fee > 0


class PropertyAuthorityFees(SkilledEmployeeAuthorityFees):
    """Property-investment route adds the DLD approval fee."""
    dld_approval_fee: float = Field(4020.0, ge=0)


class DependentAuthorityFees(CamelModel):
    professional_passport_picture: float = Field(25.0, ge=0)
    dependent_file_opening: float = Field(320.0, ge=0)
    standard_authority_costs_spouse: float = Field(4710.0, ge=0)
    standard_authority_costs_child: float = Field(4604.0, ge=0)
    mandatory_uae_medical_test: float = Field(700.0, ge=0)
    emirates_id_fee: float = Field(1155.0, ge=0)
    immigration_residency_fee_spouse: float = Field(2860.0, ge=0)
    immigration_residency_fee_child: float = Field(2750.0, ge=0)
    visa_cancellation: bool = Field(False, alias="visaCancelation")
    visa_cancellation_fee: float = Field(185.0, ge=0, alias="visaCancelationFee")
    third_party_costs_spouse: float = Field(1460.0, ge=0)
    third_party_costs_child: float = Field(1460.0, ge=0)

    @property
    def spouse_standard_costs(self) -> float:
        return (
            self.standard_authority_costs_spouse
            or (self.mandatory_uae_medical_test + self.emirates_id_fee + self.immigration_residency_fee_spouse)
            or 4710.0
        )

    @property
    def child_standard_costs(self) -> float:
        return (
            self.standard_authority_costs_child
            or (self.mandatory_uae_medical_test + self.emirates_id_fee + self.immigration_residency_fee_child)
            or 4604.0
        )

    @property
    def has_cancellation(self) -> bool:
        return self.visa_cancellation and self.visa_cancellation_fee > 0


class SpouseDependent(CamelModel):
    required: bool = False
    government_fee: float = Field(DEFAULT_SPOUSE_GOVERNMENT_FEE, ge=0)
    tme_services_fee: float = Field(DEFAULT_SPOUSE_TME_FEE, ge=0)
    visa_cancellation: bool = Field(False, alias="visaCancelation")
    visa_cancellation_fee: float = Field(0.0, ge=0, alias="visaCancelationFee")


class ChildrenDependents(CamelModel):
    count: int = Field(0, ge=0)
    government_fee: float = Field(DEFAULT_CHILD_GOVERNMENT_FEE, ge=0)
    tme_services_fee: float = Field(DEFAULT_CHILD_TME_FEE, ge=0)
    visa_cancellation: bool = Field(False, alias="visaCancelation")
    visa_cancellation_fee: float = Field(0.0, ge=0, alias="visaCancelationFee")


class Dependents(CamelModel):
    spouse: Optional[SpouseDependent] = None
    children: Optional[ChildrenDependents] = None

    @property
    def has_spouse(self) -> bool:
        return bool(self.spouse and self.spouse.required)

    @property
    def number_of_children(self) -> int:
        return self.children.count if self.children else 0


class GoldenVisaData(CamelModel):
    """Root configuration for a golden visa offer."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    date: datetime.date
    client_emails: List[str] = Field(default_factory=list)

    secondary_currency: str = DEFAULT_SECONDARY_CURRENCY
    exchange_rate: float = Field(..., gt=0, description="AED per one unit of secondary currency")

    company_type: CompanyType = "tme-fzco"
    visa_type: GoldenVisaType
    primary_visa_required: bool = True

    property_authority_fees: Optional[PropertyAuthorityFees] = None
    skilled_employee_authority_fees: Optional[SkilledEmployeeAuthorityFees] = None
    dependent_authority_fees: Optional[DependentAuthorityFees] = None

    government_fee: float = Field(0.0, ge=0)
    tme_services_fee: float = Field(DEFAULT_PRIMARY_TME_FEE, ge=0)

    dependents: Dependents = Field(default_factory=Dependents)
