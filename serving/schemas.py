"""
API request/response models.

Pattern: Input Collaborator

The engine trusts its inputs; range validation for the lifestyle form lives
here, at the HTTP boundary.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from footprint.factors import DietType, TransportMode
from footprint.models import LifestyleInputs


class LifestyleRequest(BaseModel):
    transport_km_per_week: float = Field(ge=0, le=500, description="Distance travelled per week (km)")
    transport_mode: TransportMode = Field(default=TransportMode.CAR)
    energy_kwh_per_month: float = Field(ge=0, le=1000, description="Electricity use per month (kWh)")
    lpg_kg_per_month: float = Field(default=0.0, ge=0, le=50, description="LPG use per month (kg)")
    diet_type: DietType = Field(default=DietType.VEGETARIAN)
    red_meat_meals_per_week: int = Field(default=0, ge=0, le=21)
    waste_kg_per_week: float = Field(ge=0, le=50, description="Household waste per week (kg)")
    waste_segregated: bool = Field(default=False)

    def to_inputs(self) -> LifestyleInputs:
        return LifestyleInputs(
            transport_km_per_week=self.transport_km_per_week,
            transport_mode=self.transport_mode.value,
            energy_kwh_per_month=self.energy_kwh_per_month,
            lpg_kg_per_month=self.lpg_kg_per_month,
            diet_type=self.diet_type.value,
            red_meat_meals_per_week=self.red_meat_meals_per_week,
            waste_kg_per_week=self.waste_kg_per_week,
            waste_segregated=self.waste_segregated,
        )


class FootprintRequest(LifestyleRequest):
    user_name: str = Field(default="anonymous", max_length=120)
    include_prediction: bool = Field(default=False)


class PredictionRequest(BaseModel):
    current_total: float = Field(ge=0, description="Current annual emissions (kg CO2e)")
    annual_transport_km: float = Field(ge=0)
    annual_energy_units: float = Field(ge=0)
    diet_type: str = Field(default=DietType.VEGETARIAN.value)
    annual_waste_kg: float = Field(ge=0)


class BreakdownResponse(BaseModel):
    transport: float
    energy: float
    diet: float
    waste: float
    total: float
    category: str


class RecommendationResponse(BaseModel):
    category: str
    text: str
    potential_reduction: float
    priority: int


class SummaryResponse(BaseModel):
    top_contributor: str
    top_contributor_value: float
    combined_reduction: float
    tree_equivalent: int


class BenchmarkResponse(BaseModel):
    total: float
    sustainable_target: float
    average_footprint: float
    gap_to_target: float
    gap_to_average: float
    percent_of_average: float


class PredictionResponse(BaseModel):
    predicted_emissions_1year: float
    predicted_emissions_2year: float
    confidence_score: float
    trend_direction: str


class PersistenceStatus(BaseModel):
    ok: bool
    operation: str
    count: int = 0
    record_id: Optional[str] = None
    error: Optional[str] = None


class FootprintResponse(BaseModel):
    footprint_id: Optional[str] = None
    breakdown: BreakdownResponse
    recommendations: List[RecommendationResponse]
    summary: SummaryResponse
    benchmarks: BenchmarkResponse
    eco_tip: str
    prediction: Optional[PredictionResponse] = None
    prediction_status: str = "not_requested"
    persistence: List[PersistenceStatus] = Field(default_factory=list)


class TrendResponse(BaseModel):
    prediction: Optional[PredictionResponse] = None
    prediction_status: str


class TrainingResponse(BaseModel):
    trained: bool
    result: Optional[Dict[str, Any]] = None
