# SQLAlchemy Models
from lifeadmin.models.oura_daily import OuraDaily
from lifeadmin.models.workout import Workout
from lifeadmin.models.health_goal import HealthGoal
from lifeadmin.models.person import Interaction, Person, PersonDate

__all__ = [
    "OuraDaily",
    "Workout",
    "HealthGoal",
    "Person",
    "Interaction",
    "PersonDate",
]
