"""Static base data: jobs, skills, items, their categories and unlock gates.

Everything in this module is plain data.  Entities are built from the
``*_BASE_DATA`` tables by :func:`progression.state.new_game`; requirements are
built from :data:`REQUIREMENT_TABLE`.  Category membership is looked up
through :data:`CATEGORY_INDEX`, computed once at import.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

# ---------------------------------------------------------------------------
# Category names
# ---------------------------------------------------------------------------

COMMON_WORK = "Common work"
MILITARY = "Military"
ARCANE_ASSOCIATION = "The Arcane Association"

FUNDAMENTALS = "Fundamentals"
COMBAT = "Combat"
MAGIC = "Magic"
DARK_MAGIC = "Dark magic"

PROPERTIES = "Properties"
MISC = "Misc"

# ---------------------------------------------------------------------------
# Base data tables
# ---------------------------------------------------------------------------

JOB_BASE_DATA: Dict[str, Dict] = {
    "Beggar": {"name": "Beggar", "maxXp": 50, "income": 5},
    "Farmer": {"name": "Farmer", "maxXp": 100, "income": 9},
    "Fisherman": {"name": "Fisherman", "maxXp": 200, "income": 15},
    "Miner": {"name": "Miner", "maxXp": 400, "income": 40},
    "Blacksmith": {"name": "Blacksmith", "maxXp": 800, "income": 80},
    "Merchant": {"name": "Merchant", "maxXp": 1600, "income": 150},

    "Squire": {"name": "Squire", "maxXp": 100, "income": 5},
    "Footman": {"name": "Footman", "maxXp": 1000, "income": 50},
    "Veteran footman": {"name": "Veteran footman", "maxXp": 10000, "income": 120},
    "Knight": {"name": "Knight", "maxXp": 100000, "income": 300},
    "Veteran knight": {"name": "Veteran knight", "maxXp": 1000000, "income": 1000},
    "Elite knight": {"name": "Elite knight", "maxXp": 7500000, "income": 3000},
    "Holy knight": {"name": "Holy knight", "maxXp": 40000000, "income": 15000},
    "Legendary knight": {"name": "Legendary knight", "maxXp": 150000000, "income": 50000},

    "Student": {"name": "Student", "maxXp": 100000, "income": 100},
    "Apprentice mage": {"name": "Apprentice mage", "maxXp": 1000000, "income": 1000},
    "Mage": {"name": "Mage", "maxXp": 10000000, "income": 7500},
    "Wizard": {"name": "Wizard", "maxXp": 100000000, "income": 50000},
    "Master wizard": {"name": "Master wizard", "maxXp": 10000000000, "income": 250000},
    "Chairman": {"name": "Chairman", "maxXp": 1000000000000, "income": 1000000},
}

SKILL_BASE_DATA: Dict[str, Dict] = {
    "Concentration": {"name": "Concentration", "maxXp": 100, "effect": 0.01, "description": "Skill xp"},
    "Productivity": {"name": "Productivity", "maxXp": 100, "effect": 0.01, "description": "Job xp"},
    "Bargaining": {"name": "Bargaining", "maxXp": 100, "effect": -0.01, "description": "Expenses"},
    "Meditation": {"name": "Meditation", "maxXp": 100, "effect": 0.01, "description": "Happiness"},

    "Strength": {"name": "Strength", "maxXp": 100, "effect": 0.01, "description": "Military pay"},
    "Battle tactics": {"name": "Battle tactics", "maxXp": 100, "effect": 0.01, "description": "Military xp"},
    "Muscle memory": {"name": "Muscle memory", "maxXp": 100, "effect": 0.01, "description": "Strength xp"},

    "Mana control": {"name": "Mana control", "maxXp": 100, "effect": 0.01, "description": "T.A.A. xp"},
    "Immortality": {"name": "Immortality", "maxXp": 100, "effect": 0.01, "description": "Longer lifespan"},
    "Time warping": {"name": "Time warping", "maxXp": 100, "effect": 0.01, "description": "Gamespeed"},
    "Super immortality": {"name": "Super immortality", "maxXp": 100, "effect": 0.01, "description": "Longer lifespan"},

    "Dark influence": {"name": "Dark influence", "maxXp": 100, "effect": 0.01, "description": "All xp"},
    "Evil control": {"name": "Evil control", "maxXp": 100, "effect": 0.01, "description": "Evil gain"},
    "Intimidation": {"name": "Intimidation", "maxXp": 100, "effect": -0.01, "description": "Expenses"},
    "Demon training": {"name": "Demon training", "maxXp": 100, "effect": 0.01, "description": "All xp"},
    "Blood meditation": {"name": "Blood meditation", "maxXp": 100, "effect": 0.01, "description": "Evil gain"},
    "Demon's wealth": {"name": "Demon's wealth", "maxXp": 100, "effect": 0.002, "description": "Job pay"},
}

ITEM_BASE_DATA: Dict[str, Dict] = {
    "Homeless": {"name": "Homeless", "expense": 0, "effect": 1},
    "Tent": {"name": "Tent", "expense": 15, "effect": 1.4},
    "Wooden hut": {"name": "Wooden hut", "expense": 100, "effect": 2},
    "Cottage": {"name": "Cottage", "expense": 750, "effect": 3.5},
    "House": {"name": "House", "expense": 3000, "effect": 6},
    "Large house": {"name": "Large house", "expense": 25000, "effect": 12},
    "Small palace": {"name": "Small palace", "expense": 300000, "effect": 25},
    "Grand palace": {"name": "Grand palace", "expense": 5000000, "effect": 60},

    "Book": {"name": "Book", "expense": 10, "effect": 1.5, "description": "Skill xp"},
    "Dumbbells": {"name": "Dumbbells", "expense": 50, "effect": 1.5, "description": "Strength xp"},
    "Personal squire": {"name": "Personal squire", "expense": 200, "effect": 2, "description": "Job xp"},
    "Steel longsword": {"name": "Steel longsword", "expense": 1000, "effect": 2, "description": "Military xp"},
    "Butler": {"name": "Butler", "expense": 7500, "effect": 1.5, "description": "Happiness"},
    "Sapphire charm": {"name": "Sapphire charm", "expense": 50000, "effect": 3, "description": "Magic xp"},
    "Study desk": {"name": "Study desk", "expense": 1000000, "effect": 2, "description": "Skill xp"},
    "Library": {"name": "Library", "expense": 10000000, "effect": 1.5, "description": "Skill xp"},
}

JOB_CATEGORIES: Dict[str, List[str]] = {
    COMMON_WORK: ["Beggar", "Farmer", "Fisherman", "Miner", "Blacksmith", "Merchant"],
    MILITARY: ["Squire", "Footman", "Veteran footman", "Knight", "Veteran knight",
               "Elite knight", "Holy knight", "Legendary knight"],
    ARCANE_ASSOCIATION: ["Student", "Apprentice mage", "Mage", "Wizard", "Master wizard", "Chairman"],
}

SKILL_CATEGORIES: Dict[str, List[str]] = {
    FUNDAMENTALS: ["Concentration", "Productivity", "Bargaining", "Meditation"],
    COMBAT: ["Strength", "Battle tactics", "Muscle memory"],
    MAGIC: ["Mana control", "Immortality", "Time warping", "Super immortality"],
    DARK_MAGIC: ["Dark influence", "Evil control", "Intimidation", "Demon training",
                 "Blood meditation", "Demon's wealth"],
}

ITEM_CATEGORIES: Dict[str, List[str]] = {
    PROPERTIES: ["Homeless", "Tent", "Wooden hut", "Cottage", "House", "Large house",
                 "Small palace", "Grand palace"],
    MISC: ["Book", "Dumbbells", "Personal squire", "Steel longsword", "Butler",
           "Sapphire charm", "Study desk", "Library"],
}

DEFAULT_JOB = JOB_CATEGORIES[COMMON_WORK][0]
DEFAULT_SKILL = "Concentration"
DEFAULT_PROPERTY = "Homeless"

TOOLTIPS: Dict[str, str] = {
    "Beggar": "Struggle day and night for a couple of copper coins. It feels like you are at the brink of death each day.",
    "Farmer": "Plow the fields and grow the crops. It's not much but it's honest work.",
    "Fisherman": "Reel in various fish and sell them for a handful of coins. A relaxing but still a poor paying job.",
    "Miner": "Delve into dangerous caverns and mine valuable ores. The pay is quite meager compared to the risk involved.",
    "Blacksmith": "Smelt ores and carefully forge weapons for the military. A respectable and OK paying commoner job.",
    "Merchant": "Travel from town to town, bartering fine goods. The job pays decently well and is a lot less manually-intensive.",

    "Squire": "Carry around your knight's shield and sword along the battlefield. Very meager pay but the work experience is quite valuable.",
    "Footman": "Put down your life to battle with enemy soldiers. A courageous, respectable job but you are still worthless in the grand scheme of things.",
    "Veteran footman": "More experienced and useful than the average footman, take out the enemy forces in battle with your might. The pay is not that bad.",
    "Knight": "Slash and pierce through enemy soldiers with ease, while covered in steel from head to toe. A decently paying and very respectable job.",
    "Veteran knight": "Utilising your unmatched combat ability, slaugher enemies effortlessly. Most footmen in the military would never be able to acquire such a well paying job like this.",
    "Elite knight": "Obliterate squadrons of enemy soldiers in one go with extraordinary proficiency, while equipped with the finest gear. Such a feared unit on the battlefield is paid extremely well.",
    "Holy knight": "Collapse entire armies in mere seconds with your magically imbued blade. The handful of elite knights who attain this level of power are showered with coins.",
    "Legendary knight": "Feared worldwide, obliterate entire nations in a blink of an eye. Roughly every century, only one holy knight is worthy of receiving such an esteemed title.",

    "Student": "Study the theory of mana and practice basic spells. There is minor pay to cover living costs, however, this is a necessary stage in becoming a mage.",
    "Apprentice mage": "Under the supervision of a mage, perform basic spells against enemies in battle. Generous pay will be provided to cover living costs.",
    "Mage": "Turn the tides of battle through casting intermediate spells and mentor other apprentices. The pay for this particular job is extremely high.",
    "Wizard": "Utilise advanced spells to ravage and destroy entire legions of enemy soldiers. Only a small percentage of mages deserve to attain this role and are rewarded with an insanely high pay.",
    "Master wizard": "Blessed with unparalleled talent, perform unbelievable feats with magic at will. It is said that a master wizard has enough destructive power to wipe an empire off the map.",
    "Chairman": "Spend your days administrating The Arcane Association and investigate the concepts of true immortality. The chairman receives ludicrous amounts of pay daily.",

    "Concentration": "Improve your learning speed through practising intense concentration activities.",
    "Productivity": "Learn to procrastinate less at work and receive more job experience per day.",
    "Bargaining": "Study the tricks of the trade and persuasive skills to lower any type of expense.",
    "Meditation": "Fill your mind with peace and tranquility to tap into greater happiness from within.",

    "Strength": "Condition your body and strength through harsh training. Stronger individuals are paid more in the military.",
    "Battle tactics": "Create and revise battle strategies, improving experience gained in the military.",
    "Muscle memory": "Strengthen your neurons through habit and repetition, improving strength gains throughout the body.",

    "Mana control": "Strengthen your mana channels throughout your body, aiding you in becoming a more powerful magical user.",
    "Immortality": "Lengthen your lifespan through the means of magic. However, is this truly the immortality you have tried seeking for...?",
    "Time warping": "Bend space and time through forbidden techniques, resulting in a faster gamespeed.",
    "Super immortality": "Through harnessing ancient, forbidden techniques, lengthen your lifespan drastically beyond comprehension.",

    "Dark influence": "Encompass yourself with formidable power bestowed upon you by evil, allowing you to pick up and absorb any job or skill with ease.",
    "Evil control": "Tame the raging and growing evil within you, improving evil gain in-between rebirths.",
    "Intimidation": "Learn to emit a devilish aura which strikes extreme fear into other merchants, forcing them to give you heavy discounts.",
    "Demon training": "A mere human body is too feeble and weak to withstand evil. Train with forbidden methods to slowly manifest into a demon, capable of absorbing knowledge rapidly.",
    "Blood meditation": "Grow and culture the evil within you through the sacrifise of other living beings, drastically increasing evil gain.",
    "Demon's wealth": "Through the means of dark magic, multiply the raw matter of the coins you receive from your job.",

    "Homeless": "Sleep on the uncomfortable, filthy streets while almost freezing to death every night. It cannot get any worse than this.",
    "Tent": "A thin sheet of tattered cloth held up by a couple of feeble, wooden sticks. Horrible living conditions but at least you have a roof over your head.",
    "Wooden hut": "Shabby logs and dirty hay glued together with horse manure. Much more sturdy than a tent, however, the stench isn't very pleasant.",
    "Cottage": "Structured with a timber frame and a thatched roof. Provides decent living conditions for a fair price.",
    "House": "A building formed from stone bricks and sturdy timber, which contains a few rooms. Although quite expensive, it is a comfortable abode.",
    "Large house": "Much larger than a regular house, which boasts even more rooms and multiple floors. The building is quite spacious but comes with a hefty price tag.",
    "Small palace": "A very rich and meticulously built structure rimmed with fine metals such as silver. Extremely high expenses to maintain for a lavish lifestyle.",
    "Grand palace": "A grand residence completely composed of gold and silver. Provides the utmost luxurious and comfortable living conditions possible for a ludicrous price.",

    "Book": "A place to write down all your thoughts and discoveries, allowing you to learn a lot more quickly.",
    "Dumbbells": "Heavy tools used in strenuous exercise to toughen up and accumulate strength even faster than before. ",
    "Personal squire": "Assists you in completing day to day activities, giving you more time to be productive at work.",
    "Steel longsword": "A fine blade used to slay enemies even quicker in combat and therefore gain more experience.",
    "Butler": "Keeps your household clean at all times and also prepares three delicious meals per day, leaving you in a happier, stress-free mood.",
    "Sapphire charm": "Embedded with a rare sapphire, this charm activates more mana channels within your body, providing a much easier time learning magic.",
    "Study desk": "A dedicated area which provides many fine stationary and equipment designed for furthering your progress in research.",
    "Library": "Stores a collection of books, each containing vast amounts of information from basic life skills to complex magic spells.",
}


# ---------------------------------------------------------------------------
# Category index
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CategoryIndex:
    """Name -> category lookup built once from the category tables."""

    categories: Mapping[str, Tuple[str, ...]]
    by_name: Mapping[str, str]

    @classmethod
    def build(cls, *tables: Mapping[str, Sequence[str]]) -> "CategoryIndex":
        categories: Dict[str, Tuple[str, ...]] = {}
        by_name: Dict[str, str] = {}
        for table in tables:
            for category, names in table.items():
                categories[category] = tuple(names)
                for name in names:
                    if name in by_name:
                        raise ValueError(f"{name!r} listed in both {by_name[name]!r} and {category!r}")
                    by_name[name] = category
        return cls(categories=categories, by_name=by_name)

    def category_of(self, name: str) -> Optional[str]:
        return self.by_name.get(name)

    def in_category(self, name: str, category: str) -> bool:
        return self.by_name.get(name) == category

    def members(self, category: str) -> Tuple[str, ...]:
        return self.categories.get(category, ())

    def next_in_category(self, name: str) -> Optional[str]:
        """Return the entry after ``name`` in its category, if any."""
        category = self.by_name.get(name)
        if category is None:
            return None
        names = self.categories[category]
        idx = names.index(name) + 1
        if idx >= len(names):
            return None
        return names[idx]


CATEGORY_INDEX = CategoryIndex.build(JOB_CATEGORIES, SKILL_CATEGORIES, ITEM_CATEGORIES)


# ---------------------------------------------------------------------------
# Requirement table
# ---------------------------------------------------------------------------
#
# name -> (kind, element handles, conditions).  ``kind`` is one of "task",
# "coins", "age" or "evil".  Task conditions name the task and the level to
# reach; the other kinds only carry a threshold.  Element handles are opaque
# to the engine: they are the row/button ids the UI shows or hides.


def _row(name: str) -> List[str]:
    return ["row " + name]


def _item(name: str) -> List[str]:
    return ["item " + name]


def _css(name: str) -> List[str]:
    return [name.replace(" ", "")]


def _price(name: str, factor: float = 100) -> List[Dict]:
    return [{"requirement": ITEM_BASE_DATA[name]["expense"] * factor}]


def _tasks(*pairs: Tuple[str, int]) -> List[Dict]:
    return [{"task": task, "requirement": level} for task, level in pairs]


REQUIREMENT_TABLE: Dict[str, Tuple[str, List[str], List[Dict]]] = {
    # Other
    "The Arcane Association": ("task", _css("The Arcane Association"),
                               _tasks(("Concentration", 200), ("Meditation", 200))),
    "Dark magic": ("evil", _css("Dark magic"), [{"requirement": 1}]),
    "Shop": ("coins", ["shopTabButton"], _price("Tent", 50)),
    "Rebirth tab": ("age", ["rebirthTabButton"], [{"requirement": 25}]),
    "Rebirth note 1": ("age", ["rebirthNote1"], [{"requirement": 45}]),
    "Rebirth note 2": ("age", ["rebirthNote2"], [{"requirement": 65}]),
    "Rebirth note 3": ("age", ["rebirthNote3"], [{"requirement": 200}]),
    "Evil info": ("evil", ["evilInfo"], [{"requirement": 1}]),
    "Time warping info": ("task", ["timeWarping"], _tasks(("Mage", 10))),
    "Automation": ("age", ["automation"], [{"requirement": 20}]),
    "Quick task display": ("age", ["quickTaskDisplay"], [{"requirement": 20}]),

    # Common work
    "Beggar": ("task", _row("Beggar"), []),
    "Farmer": ("task", _row("Farmer"), _tasks(("Beggar", 10))),
    "Fisherman": ("task", _row("Fisherman"), _tasks(("Farmer", 10))),
    "Miner": ("task", _row("Miner"), _tasks(("Strength", 10), ("Fisherman", 10))),
    "Blacksmith": ("task", _row("Blacksmith"), _tasks(("Strength", 30), ("Miner", 10))),
    "Merchant": ("task", _row("Merchant"), _tasks(("Bargaining", 50), ("Blacksmith", 10))),

    # Military
    "Squire": ("task", _row("Squire"), _tasks(("Strength", 5))),
    "Footman": ("task", _row("Footman"), _tasks(("Strength", 20), ("Squire", 10))),
    "Veteran footman": ("task", _row("Veteran footman"), _tasks(("Battle tactics", 40), ("Footman", 10))),
    "Knight": ("task", _row("Knight"), _tasks(("Strength", 100), ("Veteran footman", 10))),
    "Veteran knight": ("task", _row("Veteran knight"), _tasks(("Battle tactics", 150), ("Knight", 10))),
    "Elite knight": ("task", _row("Elite knight"), _tasks(("Strength", 300), ("Veteran knight", 10))),
    "Holy knight": ("task", _row("Holy knight"), _tasks(("Mana control", 500), ("Elite knight", 10))),
    "Legendary knight": ("task", _row("Legendary knight"),
                         _tasks(("Mana control", 1000), ("Battle tactics", 1000), ("Holy knight", 10))),

    # The Arcane Association
    "Student": ("task", _row("Student"), _tasks(("Concentration", 200), ("Meditation", 200))),
    "Apprentice mage": ("task", _row("Apprentice mage"), _tasks(("Mana control", 400), ("Student", 10))),
    "Mage": ("task", _row("Mage"), _tasks(("Mana control", 700), ("Apprentice mage", 10))),
    "Wizard": ("task", _row("Wizard"), _tasks(("Mana control", 1000), ("Mage", 10))),
    "Master wizard": ("task", _row("Master wizard"), _tasks(("Mana control", 1500), ("Wizard", 10))),
    "Chairman": ("task", _row("Chairman"), _tasks(("Mana control", 2000), ("Master wizard", 10))),

    # Fundamentals
    "Concentration": ("task", _row("Concentration"), []),
    "Productivity": ("task", _row("Productivity"), _tasks(("Concentration", 5))),
    "Bargaining": ("task", _row("Bargaining"), _tasks(("Concentration", 20))),
    "Meditation": ("task", _row("Meditation"), _tasks(("Concentration", 30), ("Productivity", 20))),

    # Combat
    "Strength": ("task", _row("Strength"), []),
    "Battle tactics": ("task", _row("Battle tactics"), _tasks(("Concentration", 20))),
    "Muscle memory": ("task", _row("Muscle memory"), _tasks(("Concentration", 30), ("Strength", 30))),

    # Magic
    "Mana control": ("task", _row("Mana control"), _tasks(("Concentration", 200), ("Meditation", 200))),
    "Immortality": ("task", _row("Immortality"), _tasks(("Apprentice mage", 10))),
    "Time warping": ("task", _row("Time warping"), _tasks(("Mage", 10))),
    "Super immortality": ("task", _row("Super immortality"), _tasks(("Chairman", 1000))),

    # Dark magic
    "Dark influence": ("evil", _row("Dark influence"), [{"requirement": 1}]),
    "Evil control": ("evil", _row("Evil control"), [{"requirement": 1}]),
    "Intimidation": ("evil", _row("Intimidation"), [{"requirement": 1}]),
    "Demon training": ("evil", _row("Demon training"), [{"requirement": 25}]),
    "Blood meditation": ("evil", _row("Blood meditation"), [{"requirement": 75}]),
    "Demon's wealth": ("evil", _row("Demon's wealth"), [{"requirement": 500}]),

    # Properties
    "Homeless": ("coins", _item("Homeless"), [{"requirement": 0}]),
    "Tent": ("coins", _item("Tent"), [{"requirement": 0}]),
    "Wooden hut": ("coins", _item("Wooden hut"), _price("Wooden hut")),
    "Cottage": ("coins", _item("Cottage"), _price("Cottage")),
    "House": ("coins", _item("House"), _price("House")),
    "Large house": ("coins", _item("Large house"), _price("Large house")),
    "Small palace": ("coins", _item("Small palace"), _price("Small palace")),
    "Grand palace": ("coins", _item("Grand palace"), _price("Grand palace")),

    # Misc
    "Book": ("coins", _item("Book"), [{"requirement": 0}]),
    "Dumbbells": ("coins", _item("Dumbbells"), _price("Dumbbells")),
    "Personal squire": ("coins", _item("Personal squire"), _price("Personal squire")),
    "Steel longsword": ("coins", _item("Steel longsword"), _price("Steel longsword")),
    "Butler": ("coins", _item("Butler"), _price("Butler")),
    "Sapphire charm": ("coins", _item("Sapphire charm"), _price("Sapphire charm")),
    "Study desk": ("coins", _item("Study desk"), _price("Study desk")),
    "Library": ("coins", _item("Library"), _price("Library")),
}
