"""
Built-in starter catalog.

Used when no catalog file is configured. Each action type leans on one suit:
Spades for cunning (crime), Clubs for force (combat), Diamonds for craft,
Hearts for charm (social).
"""

from typing import Any

STARTER_CATALOG: dict[str, Any] = {
    "actions": [
        # --- Crime (Spades) ---
        {
            "id": "pickpocket_drunk",
            "name": "Pickpocket Drunk",
            "type": "CRIME",
            "description": "Lift a few coins from a patron stumbling out of the saloon.",
            "difficulty": 25,
            "energy_cost": 10,
            "target_score": 25,
            "suit_bonuses": [{"suit": "SPADES", "bonus": 10, "source": "Quick hands"}],
            "rewards": {"xp": 10, "gold": 10},
            "cooldown_seconds": 60,
            "crime": {
                "witness_chance": 30,
                "jail_chance": 50,
                "jail_time_on_failure": 5,
                "wanted_level_increase": 1,
                "bail_cost": 50,
            },
        },
        {
            "id": "steal_from_market",
            "name": "Steal from Market",
            "type": "CRIME",
            "description": "Swipe goods from the market stalls without drawing attention.",
            "difficulty": 30,
            "energy_cost": 15,
            "target_score": 30,
            "suit_bonuses": [{"suit": "SPADES", "bonus": 10, "source": "Quick hands"}],
            "rewards": {"xp": 15, "gold": 20, "items": ["market_goods"]},
            "cooldown_seconds": 120,
            "crime": {
                "witness_chance": 40,
                "jail_chance": 60,
                "jail_time_on_failure": 10,
                "wanted_level_increase": 1,
                "bail_cost": 75,
            },
        },
        {
            "id": "rob_stagecoach",
            "name": "Rob Stagecoach",
            "type": "CRIME",
            "description": "Stop the afternoon coach on the canyon road and rob the passengers.",
            "difficulty": 60,
            "energy_cost": 35,
            "target_score": 60,
            "suit_bonuses": [
                {"suit": "SPADES", "bonus": 10, "source": "Ambush plan"},
                {"suit": "CLUBS", "bonus": 10, "kind": "percent", "source": "Show of force"},
            ],
            "rewards": {"xp": 60, "gold": 100, "items": ["jewelry", "pocket_watch"]},
            "min_level": 5,
            "cooldown_seconds": 1800,
            "unlock_requirements": ["gang_member"],
            "tier": 2,
            "crime": {
                "witness_chance": 70,
                "jail_chance": 100,
                "jail_time_on_failure": 60,
                "wanted_level_increase": 3,
                "bail_cost": 300,
            },
        },
        {
            "id": "crack_bank_vault",
            "name": "Crack the Bank Vault",
            "type": "CRIME",
            "description": "Only a steady hand and a strong draw open the Red Gulch vault.",
            "difficulty": 85,
            "energy_cost": 45,
            "target_score": 80,
            "suit_bonuses": [{"suit": "SPADES", "bonus": 15, "source": "Safecracking"}],
            "rewards": {"xp": 150, "gold": 400, "items": ["gold_bars"]},
            "min_level": 10,
            "required_skills": {"lockpicking": 5},
            "cooldown_seconds": 7200,
            "min_hand_category": "THREE_OF_A_KIND",
            "tier": 3,
            "crime": {
                "witness_chance": 80,
                "jail_chance": 100,
                "jail_time_on_failure": 120,
                "wanted_level_increase": 4,
                "bail_cost": 800,
            },
        },
        # --- Combat (Clubs) ---
        {
            "id": "bar_brawl",
            "name": "Bar Brawl",
            "type": "COMBAT",
            "description": "Somebody spilled your whiskey. Settle it.",
            "difficulty": 40,
            "energy_cost": 15,
            "target_score": 40,
            "suit_bonuses": [{"suit": "CLUBS", "bonus": 15, "source": "Brawler"}],
            "rewards": {"xp": 40, "gold": 20},
            "cooldown_seconds": 300,
        },
        {
            "id": "duel_outlaw",
            "name": "Duel Outlaw",
            "type": "COMBAT",
            "description": "High noon on Main Street.",
            "difficulty": 70,
            "energy_cost": 30,
            "target_score": 65,
            "suit_bonuses": [
                {"suit": "CLUBS", "bonus": 20, "kind": "percent", "source": "Quick draw"},
            ],
            "rewards": {"xp": 125, "gold": 80, "items": ["outlaw_bounty"]},
            "min_level": 8,
            "cooldown_seconds": 3600,
            "tier": 2,
        },
        # --- Craft (Diamonds) ---
        {
            "id": "shoe_horse",
            "name": "Shoe a Horse",
            "type": "CRAFT",
            "description": "Forge and fit a new set of shoes at the livery.",
            "difficulty": 30,
            "energy_cost": 15,
            "target_score": 30,
            "suit_bonuses": [{"suit": "DIAMONDS", "bonus": 10, "source": "Smithing"}],
            "rewards": {"xp": 35, "gold": 20, "items": ["horseshoe"]},
        },
        {
            "id": "brew_medicine",
            "name": "Brew Medicine",
            "type": "CRAFT",
            "description": "Mix a tonic the doc will actually pay for.",
            "difficulty": 50,
            "energy_cost": 25,
            "target_score": 50,
            "suit_bonuses": [{"suit": "DIAMONDS", "bonus": 15, "source": "Herbalism"}],
            "rewards": {"xp": 80, "gold": 45, "items": ["health_tonic"]},
            "required_skills": {"medicine": 2},
        },
        # --- Social (Hearts) ---
        {
            "id": "charm_patron",
            "name": "Charm a Patron",
            "type": "SOCIAL",
            "description": "A kind word and a free drink loosen tongues.",
            "difficulty": 25,
            "energy_cost": 10,
            "target_score": 25,
            "suit_bonuses": [{"suit": "HEARTS", "bonus": 10, "source": "Silver tongue"}],
            "rewards": {"xp": 30, "gold": 10},
        },
        {
            "id": "negotiate_trade",
            "name": "Negotiate Trade",
            "type": "SOCIAL",
            "description": "Haggle with the trading post for a better price on furs.",
            "difficulty": 50,
            "energy_cost": 20,
            "target_score": 50,
            "suit_bonuses": [
                {"suit": "HEARTS", "bonus": 10, "source": "Silver tongue"},
                {"suit": "DIAMONDS", "bonus": 5, "source": "Eye for value"},
            ],
            "rewards": {"xp": 85, "gold": 55},
            "min_level": 3,
        },
    ],
    "special_effects": [
        {
            "id": "hair_trigger",
            "name": "Hair Trigger",
            "categories": ["WEAPON"],
            "stat": "speed",
            "value": 0.1,
            "description": "Draws and fires a touch faster.",
        },
        {
            "id": "true_aim",
            "name": "True Aim",
            "categories": ["WEAPON"],
            "stat": "accuracy",
            "value": 0.15,
        },
        {
            "id": "keen_edge",
            "name": "Keen Edge",
            "categories": ["WEAPON", "TOOL"],
            "stat": "damage",
            "value": 0.1,
        },
        {
            "id": "reinforced",
            "name": "Reinforced",
            "categories": ["ARMOR", "TOOL"],
            "stat": "durability",
            "value": 0.25,
            "description": "Extra rivets where it matters.",
        },
        {
            "id": "dust_proof",
            "name": "Dust Proof",
            "categories": ["ARMOR", "ACCESSORY"],
            "stat": "resistance",
            "value": 0.1,
        },
        {
            "id": "featherweight",
            "name": "Featherweight",
            "categories": ["ARMOR", "WEAPON", "ACCESSORY"],
            "stat": "weight",
            "value": -0.2,
        },
        {
            "id": "potent_brew",
            "name": "Potent Brew",
            "categories": ["CONSUMABLE"],
            "stat": "potency",
            "value": 0.3,
        },
        {
            "id": "long_lasting",
            "name": "Long Lasting",
            "categories": ["CONSUMABLE"],
            "stat": "duration",
            "value": 0.5,
        },
        {
            "id": "lucky_charm",
            "name": "Lucky Charm",
            "categories": ["ACCESSORY"],
            "stat": "luck",
            "value": 0.05,
            "description": "Smells faintly of rabbit.",
        },
        {
            "id": "efficient",
            "name": "Efficient",
            "categories": ["TOOL"],
            "stat": "energy_cost",
            "value": -0.1,
        },
    ],
}
