from .burn_rate import calculate_burn_rate
from .grant_total import calculate_grant_total
from .ukri_salary_cost import calculate_ukri_salary_cost

__all__ = [
    "calculate_burn_rate",
    "calculate_grant_total",
    "calculate_ukri_salary_cost",
]
