import logging
import random

log = logging.getLogger(__name__)

DOG_NAMES = [
    "Ace", "Apollo", "Archer", "Atlas", "Axel", "Bandit", "Baxter", "Blaze", "Bolt", "Boomer",
    "Bruno", "Cash", "Chase", "Chief", "Cobra", "Diesel", "Duke", "Echo", "Enzo", "Falcon",
    "Finn", "Flash", "Ghost", "Gizmo", "Harley", "Hunter", "Jax", "Jet", "Koda", "Loki",
    "Maverick", "Maximus", "Nero", "Nova", "Odin", "Onyx", "Ranger", "Rex", "Rocky", "Ryder",
    "Samson", "Shadow", "Storm", "Tank", "Titan", "Toby", "Turbo", "Viper", "Wolf", "Zeus",
]

def generate_dog_name() -> str:
    """Picks a display name for a new upload. Repeats are expected."""
    name = random.choice(DOG_NAMES)
    log.info("Generated dog name %s", name)
    return "".join(name.split())
