"""Shared constant values for the jassmin pipeline."""

DATATYPES = (
    "integer", "real", "string", "code", "boolean", "nothing", "handle",
    "agent", "event", "eventid",
    "player", "playerstate", "playerscore", "playergameresult", "playerevent",
    "playerunitevent", "playerslotstate", "playercolor",
    "widget", "widgetevent",
    "unit", "unitpool", "unitstate", "unitevent", "unittype",
    "destructable", "item", "itempool", "itemtype", "ability", "buff",
    "force", "group", "trigger", "triggercondition", "triggeraction",
    "timer", "timerdialog", "location", "region", "rect", "boolexpr", "sound",
    "func", "conditionfunc", "filterfunc", "race", "racepreference",
    "gamestate", "igamestate", "fgamestate", "gameevent", "gamespeed",
    "gamedifficulty", "gametype", "gamecache", "aidifficulty", "limitop",
    "dialog", "dialogevent",
    "map", "mapflag", "mapvisibility", "mapsetting", "mapdensity", "mapcontrol",
    "volumegroup", "camera", "camerafield", "camerasetup", "placement",
    "startlocprio", "raritycontrol", "blendmode", "texmapflags",
    "effect", "effecttype", "weathereffect", "terraindeformation",
    "fogstate", "fogmodifier", "button", "quest", "questitem",
    "defeatcondition", "leaderboard", "multiboard", "multiboarditem",
    "trackable", "version", "texttag",
    "attacktype", "damagetype", "weapontype", "soundtype", "pathingtype",
    "alliancetype", "lightning", "image", "ubersplat", "hashtable",
)

# Longest first so an alternation never stops at a shorter prefix.
DATATYPE_PATTERN = "|".join(sorted(DATATYPES, key=len, reverse=True))

FOLDABLE_DATATYPES = ("integer", "real", "boolean")

KEYWORDS = frozenset(
    {
        "and", "array", "call", "constant", "debug", "else", "elseif",
        "endfunction", "endglobals", "endif", "endloop", "exitwhen",
        "extends", "false", "function", "globals", "if", "local", "loop",
        "native", "not", "null", "or", "return", "returns", "set", "takes",
        "then", "true", "type",
    }
)

RESERVED_NAMES = KEYWORDS | frozenset(DATATYPES)

ENTRY_POINTS = ("main", "config")

# Whitespace next to these characters is never significant.
OPERATOR_CHARS = "=*,+/><[]()-!"

BOOLEAN_LITERALS = ("true", "false")

RAWCODE_THRESHOLD = 999999

# Host natives whose string argument names a function or a global.
CALLBACK_NATIVE = "ExecuteFunc"
VARIABLE_EVENT_NATIVE = "TriggerRegisterVariableEvent"

CALL_GRAPH_COLORS = {
    "entry": "#8BC34A",
    "reachable": "#FFEB3B",
    "dead": "#B0BEC5",
}

DEFAULT_FUNCTION_TABLE = "jass_functions.j"
DEFAULT_CONSTANT_TABLE = "jass_constants.j"

__all__ = [
    "DATATYPES",
    "DATATYPE_PATTERN",
    "FOLDABLE_DATATYPES",
    "KEYWORDS",
    "RESERVED_NAMES",
    "ENTRY_POINTS",
    "OPERATOR_CHARS",
    "BOOLEAN_LITERALS",
    "RAWCODE_THRESHOLD",
    "CALLBACK_NATIVE",
    "VARIABLE_EVENT_NATIVE",
    "CALL_GRAPH_COLORS",
    "DEFAULT_FUNCTION_TABLE",
    "DEFAULT_CONSTANT_TABLE",
]
