import sys
import os

# Add the project root directory to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlmodel import Session, select

from defis.models.challenge import Challenge, Category, Difficulty
from defis.models.reward import Reward
from defis.services.database import engine, create_db_and_tables

# Catalog data
catalog_challenges = [
    {"title": "Dîner aux chandelles", "description": "Préparez un dîner aux chandelles surprise à la maison.", "category": Category.ROMANTIQUE, "difficulty": Difficulty.FACILE, "points_reward": 10},
    {"title": "Lettre d'amour", "description": "Écrivez une lettre manuscrite à votre partenaire.", "category": Category.ROMANTIQUE, "difficulty": Difficulty.MOYEN, "points_reward": 20},
    {"title": "Week-end surprise", "description": "Organisez un week-end dont votre partenaire ne connaît pas la destination.", "category": Category.ROMANTIQUE, "difficulty": Difficulty.DIFFICILE, "points_reward": 50},
    {"title": "Rando au lever du soleil", "description": "Partez marcher ensemble pour voir le soleil se lever.", "category": Category.AVENTURE, "difficulty": Difficulty.MOYEN, "points_reward": 25},
    {"title": "Nouvelle activité", "description": "Essayez ensemble une activité qu'aucun de vous n'a jamais faite.", "category": Category.AVENTURE, "difficulty": Difficulty.DIFFICILE, "points_reward": 40},
    {"title": "Recette à l'aveugle", "description": "Cuisinez une recette choisie par votre partenaire sans la lire à l'avance.", "category": Category.CULINAIRE, "difficulty": Difficulty.MOYEN, "points_reward": 20},
    {"title": "Petit-déjeuner au lit", "description": "Servez le petit-déjeuner au lit un matin de semaine.", "category": Category.CULINAIRE, "difficulty": Difficulty.FACILE, "points_reward": 10},
    {"title": "Portrait croisé", "description": "Dessinez le portrait l'un de l'autre en dix minutes.", "category": Category.CREATIF, "difficulty": Difficulty.FACILE, "points_reward": 10},
    {"title": "Séance de sport à deux", "description": "Faites une séance de sport complète ensemble.", "category": Category.SPORT, "difficulty": Difficulty.MOYEN, "points_reward": 20},
    {"title": "Soirée musée", "description": "Visitez une exposition et échangez vos impressions.", "category": Category.CULTURE, "difficulty": Difficulty.FACILE, "points_reward": 15},
    {"title": "Trois questions", "description": "Posez-vous trois questions que vous ne vous êtes jamais posées.", "category": Category.COMMUNICATION, "difficulty": Difficulty.FACILE, "points_reward": 10},
    {"title": "Massage relaxant", "description": "Offrez un massage de vingt minutes à votre partenaire.", "category": Category.BIEN_ETRE, "difficulty": Difficulty.FACILE, "points_reward": 15},
]

rewards = [
    {"name": "Premier pas", "description": "Gagnez vos 10 premiers points", "icon": "🌱", "points_required": 10},
    {"name": "Complices", "description": "Atteignez 100 points", "icon": "💞", "points_required": 100},
    {"name": "Aventuriers", "description": "Atteignez 250 points", "icon": "🧭", "points_required": 250},
    {"name": "Inséparables", "description": "Atteignez 500 points", "icon": "🏆", "points_required": 500},
    {"name": "Légendes", "description": "Atteignez 1000 points", "icon": "👑", "points_required": 1000},
]

def create_challenges(session: Session):
    existing = set(session.exec(select(Challenge.title)).all())
    created = []
    for challenge_data in catalog_challenges:
        if challenge_data["title"] in existing:
            continue
        challenge = Challenge(**challenge_data, is_approved=True)
        created.append(challenge)

    session.add_all(created)
    session.commit()
    return created

def create_rewards(session: Session):
    existing = set(session.exec(select(Reward.name)).all())
    created = [Reward(**reward_data) for reward_data in rewards if reward_data["name"] not in existing]

    session.add_all(created)
    session.commit()
    return created

def main():
    create_db_and_tables()

    with Session(engine) as session:
        challenges = create_challenges(session)
        print(f"Created {len(challenges)} challenges")

        created_rewards = create_rewards(session)
        print(f"Created {len(created_rewards)} rewards")

if __name__ == "__main__":
    main()
