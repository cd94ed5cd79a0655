from __future__ import annotations

from idlerpg.domain.models.location import EncounterTableEntry, Location


STARTING_LOCATION_ID = "lumbridge"

_MINE_DESCRIPTION = "Rock walls echo with the sound of pickaxes. Ore veins glitter in the torchlight."
_BANK_DESCRIPTION = "A quiet clerk watches over rows of lockboxes. Store items and coins."


LOCATION_DEFINITIONS: dict[str, dict] = {
    # Lumbridge area
    "lumbridge": {
        "name": "Lumbridge",
        "type": "city",
        "emoji": "🏘️",
        "description": "A peaceful castle town by a winding river. Many adventurers start their journey here under the watchful eye of Duke Horacio.",
        "connections": {
            "lumbridge_castle": 1500,
            "lumbridge_swamp": 4000,
            "al_kharid": 3000,
            "draynor_village": 8000,
            "varrock": 15000,
        },
    },
    "lumbridge_castle": {
        "name": "Lumbridge Castle",
        "type": "castle",
        "emoji": "🏰",
        "description": "The grand stone castle of Duke Horacio. Banners hang from the walls, and guards stand watch at every corner.",
        "parent": "lumbridge",
        "connections": {"lumbridge": 1500, "lumbridge_castle_bank": 1000},
    },
    "lumbridge_castle_bank": {
        "name": "Lumbridge Castle Bank",
        "type": "bank",
        "emoji": "🏦",
        "description": _BANK_DESCRIPTION,
        "parent": "lumbridge_castle",
        "connections": {"lumbridge_castle": 1000},
        "actions": ["bank"],
    },
    "lumbridge_swamp": {
        "name": "Lumbridge Swamp",
        "type": "hub",
        "emoji": "🐸",
        "description": "Murky waters and twisted trees. Frogs croak, and more dangerous creatures lurk in the shadows.",
        "parent": "lumbridge",
        "connections": {
            "lumbridge": 4000,
            "lumbridge_swamp_mine": 3000,
            "draynor_manor": 5000,
            "draynor_village": 6000,
        },
        "encounters": [("swamp_creature", 10), ("small_rat", 50)],
    },
    "lumbridge_swamp_mine": {
        "name": "Lumbridge Swamp Mine",
        "type": "mine",
        "emoji": "⛏️",
        "description": _MINE_DESCRIPTION,
        "parent": "lumbridge_swamp",
        "connections": {"lumbridge_swamp": 3000},
        "actions": ["mine"],
        "mining_options": ["copper_ore", "tin_ore"],
    },
    # Varrock area
    "varrock": {
        "name": "Varrock",
        "type": "city",
        "emoji": "🏰",
        "description": "The bustling capital city with markets, guards, and adventure around every corner.",
        "connections": {
            "grand_exchange": 3000,
            "varrock_west_bank": 2000,
            "varrock_east_mine": 4000,
            "varrock_palace": 2500,
            "edgeville": 8000,
            "lumbridge": 15000,
            "barbarian_village": 10000,
        },
    },
    "varrock_east_mine": {
        "name": "Varrock East Mine",
        "type": "mine",
        "emoji": "⛏️",
        "description": _MINE_DESCRIPTION,
        "parent": "varrock",
        "connections": {"varrock": 4000},
        "actions": ["mine"],
        "mining_options": ["iron_ore", "coal"],
    },
    "varrock_west_bank": {
        "name": "Varrock West Bank",
        "type": "bank",
        "emoji": "🏦",
        "description": _BANK_DESCRIPTION,
        "parent": "varrock",
        "connections": {"varrock": 2000},
        "actions": ["bank"],
    },
    "varrock_palace": {
        "name": "Varrock Palace",
        "type": "palace",
        "emoji": "👑",
        "description": "The grand palace where King Roald rules over Varrock.",
        "parent": "varrock",
        "connections": {"varrock": 2500},
    },
    "grand_exchange": {
        "name": "Grand Exchange",
        "type": "shop",
        "emoji": "💰",
        "description": "The bustling marketplace where merchants trade goods from across Gielinor.",
        "parent": "varrock",
        "connections": {"varrock": 3000},
        "actions": ["shop"],
    },
    # Falador area
    "falador": {
        "name": "Falador",
        "type": "city",
        "emoji": "🛡️",
        "description": "The majestic white walls of Falador rise before you. Knights patrol the streets, and the gleaming castle towers above the bustling city square.",
        "connections": {
            "falador_bank": 1500,
            "falador_mine": 3000,
            "crafting_guild": 8000,
            "barbarian_village": 12000,
            "port_sarim": 12000,
            "rimmington": 10000,
            "edgeville": 15000,
        },
    },
    "falador_mine": {
        "name": "Falador Mine",
        "type": "mine",
        "emoji": "⛏️",
        "description": _MINE_DESCRIPTION,
        "parent": "falador",
        "connections": {"falador": 3000},
        "actions": ["mine"],
        "mining_options": ["copper_ore", "tin_ore", "iron_ore", "coal"],
    },
    "falador_bank": {
        "name": "Falador East Bank",
        "type": "bank",
        "emoji": "🏦",
        "description": _BANK_DESCRIPTION,
        "parent": "falador",
        "connections": {"falador": 1500},
        "actions": ["bank"],
    },
    "crafting_guild": {
        "name": "Crafting Guild",
        "type": "guild",
        "emoji": "🔨",
        "description": "Anvils line the walls, each scarred from use. Hammer bars into gear or craft boxes to capture creatures.",
        "parent": "falador",
        "connections": {"falador": 8000},
        "actions": ["craft"],
    },
    # Edgeville and the Wilderness
    "edgeville": {
        "name": "Edgeville",
        "type": "city",
        "emoji": "🏘️",
        "description": "A small town on the edge of civilization. The Wilderness looms to the north.",
        "connections": {
            "edgeville_furnace": 1500,
            "wilderness": 2000,
            "varrock": 8000,
            "barbarian_village": 5000,
            "falador": 15000,
        },
    },
    "edgeville_furnace": {
        "name": "Edgeville Furnace",
        "type": "furnace",
        "emoji": "🔥",
        "description": "Intense heat radiates from the furnace. This is where ores become ingots.",
        "parent": "edgeville",
        "connections": {"edgeville": 1500},
        "actions": ["smelt"],
    },
    "wilderness": {
        "name": "Wilderness",
        "type": "combat",
        "emoji": "⚔️",
        "description": "A dangerous wasteland where outlaws and monsters roam freely.",
        "parent": "edgeville",
        "connections": {"edgeville": 2000},
        "actions": ["combat"],
        "encounters": [("goblin", 5), ("swamp_creature", 3), ("mad_cow", 2)],
    },
    "barbarian_village": {
        "name": "Barbarian Village",
        "type": "village",
        "emoji": "🪓",
        "description": "A rough settlement of fierce warriors. Longhouses dot the landscape.",
        "connections": {"edgeville": 5000, "varrock": 10000, "falador": 12000},
        "encounters": [("mad_cow", 10)],
    },
    # Al Kharid
    "al_kharid": {
        "name": "Al Kharid",
        "type": "city",
        "emoji": "🏜️",
        "description": "Golden dunes surround this desert palace. The heat is intense, and guards watch the palace gates carefully.",
        "connections": {"al_kharid_mine": 3000, "lumbridge": 3000},
    },
    "al_kharid_mine": {
        "name": "Al Kharid Mine",
        "type": "mine",
        "emoji": "⛏️",
        "description": _MINE_DESCRIPTION,
        "parent": "al_kharid",
        "connections": {"al_kharid": 3000},
        "actions": ["mine"],
        "mining_options": ["copper_ore", "tin_ore", "iron_ore"],
    },
    # Draynor area
    "draynor_village": {
        "name": "Draynor Village",
        "type": "village",
        "emoji": "🏘️",
        "description": "A quiet village with a dark reputation. Strange things happen here at night.",
        "connections": {
            "draynor_manor": 5000,
            "wizards_tower": 6000,
            "port_sarim": 7000,
            "lumbridge_swamp": 6000,
            "lumbridge": 8000,
        },
    },
    "draynor_manor": {
        "name": "Draynor Manor",
        "type": "combat",
        "emoji": "🏚️",
        "description": "An eerie mansion that seems to watch you. Dark magic lingers in the air.",
        "parent": "draynor_village",
        "connections": {"draynor_village": 5000, "lumbridge_swamp": 5000},
        "actions": ["combat"],
        "encounters": [("goblin", 10)],
    },
    "wizards_tower": {
        "name": "Wizards' Tower",
        "type": "tower",
        "emoji": "🔮",
        "description": "A tall tower where wizards study arcane magic. Strange lights flicker in the windows.",
        "parent": "draynor_village",
        "connections": {"draynor_village": 6000},
    },
    # Port Sarim and Rimmington
    "port_sarim": {
        "name": "Port Sarim",
        "type": "port",
        "emoji": "⛵",
        "description": "A busy port town with ships coming and going. The smell of salt and fish fills the air.",
        "connections": {"draynor_village": 7000, "falador": 12000, "rimmington": 8000},
    },
    "rimmington": {
        "name": "Rimmington",
        "type": "village",
        "emoji": "🏘️",
        "description": "A small mining village near the coast. Quiet and peaceful.",
        "connections": {"port_sarim": 8000, "falador": 10000},
    },
}


def build_locations(definitions: dict[str, dict] | None = None) -> dict[str, Location]:
    rows = LOCATION_DEFINITIONS if definitions is None else definitions
    locations: dict[str, Location] = {}
    for location_id, config in rows.items():
        locations[location_id] = Location(
            id=location_id,
            name=str(config.get("name", location_id)),
            type=str(config.get("type", "hub")),
            description=str(config.get("description", "")),
            emoji=str(config.get("emoji", "")),
            connections=dict(config.get("connections", {})),
            parent=config.get("parent"),
            actions=list(config.get("actions", [])),
            mining_options=list(config.get("mining_options", [])),
            encounters=[
                EncounterTableEntry(enemy_id=enemy_id, weight=weight)
                for enemy_id, weight in config.get("encounters", [])
            ],
        )
    return locations
