# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# profiles doit précéder spots (spots.user_id → profiles.id).

from updock.models.profile import Profile  # noqa: F401  doit précéder spot
from updock.models.spot import SpotRow  # noqa: F401
from updock.models.favorite import Favorite  # noqa: F401
