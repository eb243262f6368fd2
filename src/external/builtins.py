"""Engine-provided symbols seeded into every symbol table.

The tables are keyed by game version (``G1``, ``G112``, ``G130``, ``G2``)
and root category (``CONTENT``, ``MENU``, ``PFX``, ...). All names are
upper-case; they are seeded with an empty source file and line 0.
"""

from __future__ import annotations

from contract.models import Symbol

# ---------------------------------------------------------------------------
# Engine external functions (content scripts)
# ---------------------------------------------------------------------------

_CONTENT_FUNCTIONS = (
    "AI_AIMAT", "AI_ALIGNTOFP", "AI_ALIGNTOWP", "AI_ASK", "AI_ASKTEXT",
    "AI_ATTACK", "AI_CANSEENPC", "AI_COMBATREACTTODAMAGE", "AI_CONTINUEROUTINE",
    "AI_DEFEND", "AI_DODGE", "AI_DRAWWEAPON", "AI_DROPITEM", "AI_DROPMOB",
    "AI_EQUIPARMOR", "AI_EQUIPBESTARMOR", "AI_EQUIPBESTMELEEWEAPON",
    "AI_EQUIPBESTRANGEDWEAPON", "AI_FINISHINGMOVE", "AI_FLEE", "AI_GOTOFP",
    "AI_GOTOITEM", "AI_GOTONEXTFP", "AI_GOTONPC", "AI_GOTOSOUND", "AI_GOTOWP",
    "AI_LOOKAT", "AI_LOOKATNPC", "AI_OUTPUT", "AI_OUTPUTSVM", "AI_OUTPUTSVM_OVERLAY",
    "AI_PLAYANI", "AI_PLAYANIBS", "AI_PLAYCUTSCENE", "AI_PLAYFX", "AI_POINTAT",
    "AI_POINTATNPC", "AI_PROCESSINFOS", "AI_QUICKLOOK", "AI_READYMELEEWEAPON",
    "AI_READYRANGEDWEAPON", "AI_READYSPELL", "AI_REMOVEWEAPON", "AI_SETNPCSTOSTATE",
    "AI_SETWALKMODE", "AI_SHOOTAT", "AI_STANDUP", "AI_STANDUPQUICK", "AI_STARTSTATE",
    "AI_STOPAIM", "AI_STOPFX", "AI_STOPLOOKAT", "AI_STOPPOINTAT",
    "AI_STOPPROCESSINFOS", "AI_TAKEITEM", "AI_TAKEMOB", "AI_TELEPORT", "AI_TURNAWAY",
    "AI_TURNTONPC", "AI_TURNTOSOUND", "AI_UNEQUIPARMOR", "AI_UNEQUIPWEAPONS",
    "AI_UNREADYSPELL", "AI_USEITEM", "AI_USEITEMTOSTATE", "AI_USEMOB", "AI_WAIT",
    "AI_WAITFORQUESTION", "AI_WAITMS", "AI_WAITTILLEND", "AI_WHIRLAROUND",
    "AI_WHIRLAROUNDTOSOURCE",
    "CONCATSTRINGS", "CREATEINVITEM", "CREATEINVITEMS",
    "DOC_CREATE", "DOC_CREATEMAP", "DOC_FONT", "DOC_OPEN", "DOC_PRINT",
    "DOC_PRINTLINE", "DOC_PRINTLINES", "DOC_SETFONT", "DOC_SETLEVEL",
    "DOC_SETMARGINS", "DOC_SETPAGE", "DOC_SETPAGES", "DOC_SHOW",
    "EQUIPITEM", "EXITGAME", "FLOATTOINT", "FLOATTOSTRING",
    "GAME_INITENGLISH", "GAME_INITGERMAN",
    "HLP_CUTSCENEPLAYED", "HLP_GETINSTANCEID", "HLP_GETNPC", "HLP_ISITEM",
    "HLP_ISVALIDITEM", "HLP_ISVALIDNPC", "HLP_RANDOM", "HLP_STRCMP",
    "INFO_ADDCHOICE", "INFO_CLEARCHOICES", "INFOMANAGER_HASFINISHED",
    "INTTOFLOAT", "INTTOSTRING", "INTRODUCECHAPTER",
    "LOG_ADDENTRY", "LOG_CREATETOPIC", "LOG_SETTOPICSTATUS",
    "MDL_APPLYOVERLAYMDS", "MDL_APPLYOVERLAYMDSTIMED", "MDL_APPLYRANDOMANI",
    "MDL_APPLYRANDOMANIFREQ", "MDL_APPLYRANDOMFACEANI", "MDL_REMOVEOVERLAYMDS",
    "MDL_SETMODELFATNESS", "MDL_SETMODELSCALE", "MDL_SETVISUAL", "MDL_SETVISUALBODY",
    "MDL_STARTFACEANI",
    "MIS_ADDMISSIONENTRY", "MIS_GETSTATUS", "MIS_ONTIME", "MIS_REMOVEMISSION",
    "MIS_SETSTATUS", "MOB_CREATEITEMS", "MOB_HASITEMS",
    "NPC_AREWESTRONGER", "NPC_CANSEEITEM", "NPC_CANSEENPC", "NPC_CANSEENPCFREELOS",
    "NPC_CANSEESOURCE", "NPC_CHANGEATTRIBUTE", "NPC_CHECKAVAILABLEMISSION",
    "NPC_CHECKINFO", "NPC_CHECKOFFERMISSION", "NPC_CHECKRUNNINGMISSION",
    "NPC_CLEARAIQUEUE", "NPC_CLEARINVENTORY", "NPC_CREATESPELL", "NPC_DELETENEWS",
    "NPC_EXCHANGEROUTINE", "NPC_GETACTIVESPELL", "NPC_GETACTIVESPELLCAT",
    "NPC_GETACTIVESPELLLEVEL", "NPC_GETATTITUDE", "NPC_GETBODYSTATE",
    "NPC_GETCOMRADES", "NPC_GETDETECTEDMOB", "NPC_GETDISTTOITEM",
    "NPC_GETDISTTONPC", "NPC_GETDISTTOPLAYER", "NPC_GETDISTTOWP",
    "NPC_GETEQUIPPEDARMOR", "NPC_GETEQUIPPEDMELEEWEAPON",
    "NPC_GETEQUIPPEDRANGEDWEAPON", "NPC_GETGUILDATTITUDE", "NPC_GETINVITEM",
    "NPC_GETINVITEMBYSLOT", "NPC_GETLOOKATTARGET", "NPC_GETNEARESTWP",
    "NPC_GETNEWSOFFENDER", "NPC_GETNEWSVICTIM", "NPC_GETNEWSWITNESS",
    "NPC_GETNEXTTARGET", "NPC_GETNEXTWP", "NPC_GETPERMATTITUDE",
    "NPC_GETPORTALGUILD", "NPC_GETPORTALOWNER", "NPC_GETREADIEDWEAPON",
    "NPC_GETSTATETIME", "NPC_GETTALENTSKILL", "NPC_GETTALENTVALUE", "NPC_GETTARGET",
    "NPC_GETTRUEGUILD", "NPC_GIVEINFO", "NPC_GIVEITEM", "NPC_HASBODYFLAG",
    "NPC_HASDETECTEDNPC", "NPC_HASEQUIPPEDARMOR", "NPC_HASEQUIPPEDMELEEWEAPON",
    "NPC_HASEQUIPPEDRANGEDWEAPON", "NPC_HASEQUIPPEDWEAPON", "NPC_HASITEMS",
    "NPC_HASNEWS", "NPC_HASOFFERED", "NPC_HASRANGEDWEAPONWITHAMMO",
    "NPC_HASREADIEDMELEEWEAPON", "NPC_HASREADIEDRANGEDWEAPON",
    "NPC_HASREADIEDWEAPON", "NPC_HASSPELL", "NPC_ISAIMING", "NPC_ISDEAD",
    "NPC_ISDETECTEDMOBOWNEDBYGUILD", "NPC_ISDETECTEDMOBOWNEDBYNPC",
    "NPC_ISINCUTSCENE", "NPC_ISINFIGHTMODE", "NPC_ISINROUTINE", "NPC_ISINSTATE",
    "NPC_ISNEAR", "NPC_ISNEWSGOSSIP", "NPC_ISNEXTTARGETAVAILABLE", "NPC_ISONFP",
    "NPC_ISPLAYER", "NPC_ISPLAYERINMYROOM", "NPC_ISVOICEACTIVE", "NPC_ISWAYBLOCKED",
    "NPC_KNOWSINFO", "NPC_KNOWSPLAYER", "NPC_LEARNSPELL", "NPC_MEMORYENTRY",
    "NPC_MEMORYENTRYGUILD", "NPC_OWNEDBYGUILD", "NPC_OWNEDBYNPC",
    "NPC_PERCDISABLE", "NPC_PERCENABLE", "NPC_PERCEIVEALL", "NPC_PLAYANI",
    "NPC_REFUSETALK", "NPC_REMOVEINVITEM", "NPC_REMOVEINVITEMS",
    "NPC_SENDPASSIVEPERC", "NPC_SENDSINGLEPERC", "NPC_SETACTIVESPELLINFO",
    "NPC_SETATTITUDE", "NPC_SETKNOWSPLAYER", "NPC_SETPERCTIME", "NPC_SETREFUSETALK",
    "NPC_SETSTATETIME", "NPC_SETTALENTSKILL", "NPC_SETTALENTVALUE", "NPC_SETTARGET",
    "NPC_SETTEMPATTITUDE", "NPC_SETTOFIGHTMODE", "NPC_SETTOFISTMODE",
    "NPC_SETTRUEGUILD", "NPC_STARTITEMREACTMODULES", "NPC_STOPANI",
    "NPC_WASINSTATE", "NPC_WASPLAYERINMYROOM",
    "PERC_SETRANGE", "PLAYVIDEO", "PRINT", "PRINTDEBUG", "PRINTDEBUGCH",
    "PRINTDEBUGINST", "PRINTDEBUGINSTCH", "PRINTDIALOG", "PRINTMULTI", "PRINTSCREEN",
    "RTN_EXCHANGE", "SETPERCENTDONE", "SND_GETDISTTOSOURCE", "SND_ISSOURCEITEM",
    "SND_ISSOURCENPC", "SND_PLAY", "SND_PLAY3D",
    "TA", "TA_BEGINOVERLAY", "TA_CS", "TA_ENDOVERLAY", "TA_MIN", "TA_REMOVEOVERLAY",
    "TAL_CONFIGURE",
    "WLD_ASSIGNROOMTOGUILD", "WLD_ASSIGNROOMTONPC", "WLD_DETECTITEM",
    "WLD_DETECTNPC", "WLD_DETECTNPCEX", "WLD_DETECTPLAYER",
    "WLD_EXCHANGEGUILDATTITUDES", "WLD_GETDAY", "WLD_GETFORMERPLAYERPORTALGUILD",
    "WLD_GETFORMERPLAYERPORTALOWNER", "WLD_GETGUILDATTITUDE", "WLD_GETMOBSTATE",
    "WLD_GETPLAYERPORTALGUILD", "WLD_GETPLAYERPORTALOWNER", "WLD_INSERTITEM",
    "WLD_INSERTNPC", "WLD_INSERTNPCANDRESPAWN", "WLD_INSERTOBJECT",
    "WLD_ISFPAVAILABLE", "WLD_ISMOBAVAILABLE", "WLD_ISNEXTFPAVAILABLE", "WLD_ISTIME",
    "WLD_PLAYEFFECT", "WLD_REMOVEITEM", "WLD_REMOVENPC", "WLD_SENDTRIGGER",
    "WLD_SENDUNTRIGGER", "WLD_SETGUILDATTITUDE", "WLD_SETMOBROUTINE",
    "WLD_SETOBJECTROUTINE", "WLD_SETTIME", "WLD_SPAWNNPCRANGE", "WLD_STOPEFFECT",
)

# Removed from the engine after the first release.
_G1_ONLY_FUNCTIONS = ("AI_LOOKFORITEM",)

_G112_FUNCTIONS = (
    "AI_PRINTSCREEN", "AI_SND_PLAY", "AI_SND_PLAY3D", "DOC_MAPCOORDINATES",
    "GAME_INITENGINTL", "HLP_GETINSTANCEIDBYNAME", "NPC_GETACTIVESPELLISSCROLL",
    "NPC_GETHEIGHTTOITEM", "NPC_GETHEIGHTTONPC", "NPC_ISDRAWINGSPELL",
    "NPC_ISDRAWINGWEAPON", "NPC_ISINPLAYERSROOM", "NPC_SETASHOSTILE",
    "PRINTSCREENCOLORED", "WLD_DETECTNPCEXATT", "WLD_ISRAINING",
    "WLD_SETGUILDATTITUDES", "WLD_STOPPARTICLEFX",
)

_G130_FUNCTIONS = _G112_FUNCTIONS + ("EXITSESSION", "NPC_GETPORTALGUILDEX")

_G2_FUNCTIONS = _G130_FUNCTIONS + (
    "AI_READYSPELLEX", "AI_TELEPORTTOWP", "NPC_GETLASTHITSPELLCAT",
    "NPC_GETLASTHITSPELLID", "NPC_HASEQUIPPEDRUNE", "NPC_ISINSTATEEX",
    "WLD_GETPLAYERPORTALROOM",
)

_MENU_FUNCTIONS = (
    "APPLY_OPTIONS_AUDIO", "APPLY_OPTIONS_CONTROLS", "APPLY_OPTIONS_GAME",
    "APPLY_OPTIONS_PERFORMANCE", "APPLY_OPTIONS_VIDEO", "PLAYVIDEO",
    "PLAYVIDEOEX", "UPDATE_CHOICEBOX",
)

# ---------------------------------------------------------------------------
# Engine classes and their members
# ---------------------------------------------------------------------------

_MEMBERS_C_NPC = (
    "ID", "NAME", "SLOT", "NPCTYPE", "FLAGS", "ATTRIBUTE", "PROTECTION", "DAMAGE",
    "DAMAGETYPE", "GUILD", "LEVEL", "MISSION", "FIGHT_TACTIC", "WEAPON", "VOICE",
    "VOICEPITCH", "BODYMASS", "DAILY_ROUTINE", "START_AISTATE", "SPAWNPOINT",
    "SPAWNDELAY", "SENSES", "SENSES_RANGE", "AIVAR", "WP", "EXP", "EXP_NEXT", "LP",
)

_MEMBERS_C_ITEM = (
    "ID", "NAME", "NAMEID", "HP", "HP_MAX", "MAINFLAG", "FLAGS", "WEIGHT", "VALUE",
    "DAMAGETYPE", "DAMAGETOTAL", "DAMAGE", "WEAR", "PROTECTION", "NUTRITION",
    "COND_ATR", "COND_VALUE", "CHANGE_ATR", "CHANGE_VALUE", "MAGIC", "ON_EQUIP",
    "ON_UNEQUIP", "ON_STATE", "OWNER", "OWNERGUILD", "DISGUISEGUILD", "VISUAL",
    "VISUAL_CHANGE", "VISUAL_SKIN", "SCEMENAME", "MATERIAL", "MUNITION", "SPELL",
    "RANGE", "MAG_CIRCLE", "DESCRIPTION", "TEXT", "COUNT",
)

_MEMBERS_C_INFO = (
    "NPC", "NR", "IMPORTANT", "CONDITION", "INFORMATION", "DESCRIPTION", "TRADE",
    "PERMANENT",
)

_MEMBERS_C_PARTICLEFX = (
    "PPSVALUE", "PPSSCALEKEYS_S", "PPSISLOOPING", "PPSISSMOOTH", "PPSFPS",
    "PPSCREATEEM_S", "PPSCREATEEMDELAY", "SHPTYPE_S", "SHPFOR_S", "SHPOFFSETVEC_S",
    "SHPDISTRIBTYPE_S", "SHPDISTRIBWALKSPEED", "SHPISVOLUME", "SHPDIM_S",
    "SHPMESH_S", "SHPMESHRENDER_B", "SHPSCALEKEYS_S", "SHPSCALEISLOOPING",
    "SHPSCALEISSMOOTH", "SHPSCALEFPS", "DIRMODE_S", "DIRFOR_S", "DIRMODETARGETFOR_S",
    "DIRMODETARGETPOS_S", "DIRANGLEHEAD", "DIRANGLEHEADVAR", "DIRANGLEELEV",
    "DIRANGLEELEVVAR", "VELAVG", "VELVAR", "LSPPARTAVG", "LSPPARTVAR",
    "FLYGRAVITY_S", "FLYCOLLDET_B", "VISNAME_S", "VISORIENTATION_S",
    "VISTEXISQUADPOLY", "VISTEXANIFPS", "VISTEXANIISLOOPING", "VISTEXCOLORSTART_S",
    "VISTEXCOLOREND_S", "VISSIZESTART_S", "VISSIZEENDSCALE", "VISALPHAFUNC_S",
    "VISALPHASTART", "VISALPHAEND", "TRLFADESPEED", "TRLTEXTURE_S", "TRLWIDTH",
    "MRKFADESPEED", "MRKTEXTURE_S",
)

_MEMBERS_C_SFX = (
    "FILE", "PITCHOFF", "PITCHVAR", "VOL", "LOOP", "LOOPSTARTOFFSET",
    "LOOPENDOFFSET", "REVERBLEVEL", "PFXNAME",
)

_MEMBERS_C_MUSICTHEME = (
    "FILE", "VOL", "LOOP", "REVERBMIX", "REVERBTIME", "TRANSTYPE", "TRANSSUBTYPE",
)

# Gothic 2 Classic class extensions.
_G130_C_NPC = _MEMBERS_C_NPC + ("HITCHANCE", "BODYSTATEINTERRUPTABLEOVERRIDE", "NOFOCUS")
_G130_C_ITEM = _MEMBERS_C_ITEM + ("INV_ZBIAS", "INV_ROTX", "INV_ROTY", "INV_ROTZ", "INV_ANIMATE")
_G130_C_PARTICLEFX = _MEMBERS_C_PARTICLEFX + (
    "FLOCKMODE", "FLOCKSTRENGTH", "USEEMITTERSFOR", "TIMESTARTEND_S", "M_BISAMBIENTPFX",
)

_NPC_INSTANCES = ("C_NPC", "SELF", "OTHER", "VICTIM", "HERO")
_ITEM_INSTANCES = ("C_ITEM", "ITEM")


def expand_class(names: tuple[str, ...], members: tuple[str, ...]) -> list[str]:
    """Return ``names`` followed by every ``<name>.<member>`` combination."""
    return list(names) + [f"{name}.{member}" for name in names for member in members]


def _content_classes(npc: tuple[str, ...], item: tuple[str, ...]) -> list[str]:
    return [
        *expand_class(_NPC_INSTANCES, npc),
        *expand_class(_ITEM_INSTANCES, item),
        *expand_class(("C_INFO",), _MEMBERS_C_INFO),
    ]


EXTERNALS: dict[str, dict[str, tuple[str, ...]]] = {
    "G1": {
        "CONTENT": (
            *_CONTENT_FUNCTIONS,
            *_G1_ONLY_FUNCTIONS,
            *_content_classes(_MEMBERS_C_NPC, _MEMBERS_C_ITEM),
        ),
        "MENU": _MENU_FUNCTIONS,
        "PFX": tuple(expand_class(("C_PARTICLEFX",), _MEMBERS_C_PARTICLEFX)),
        "SFX": tuple(expand_class(("C_SFX",), _MEMBERS_C_SFX)),
        "MUSIC": tuple(expand_class(("C_MUSICTHEME",), _MEMBERS_C_MUSICTHEME)),
    },
    "G112": {
        "CONTENT": (
            *_CONTENT_FUNCTIONS,
            *_G112_FUNCTIONS,
            *_content_classes(_MEMBERS_C_NPC, _MEMBERS_C_ITEM),
        ),
        "MENU": _MENU_FUNCTIONS,
        "PFX": tuple(expand_class(("C_PARTICLEFX",), _MEMBERS_C_PARTICLEFX)),
        "SFX": tuple(expand_class(("C_SFX",), _MEMBERS_C_SFX)),
        "MUSIC": tuple(expand_class(("C_MUSICTHEME",), _MEMBERS_C_MUSICTHEME)),
    },
    "G130": {
        "CONTENT": (
            *_CONTENT_FUNCTIONS,
            *_G130_FUNCTIONS,
            *_content_classes(_G130_C_NPC, _G130_C_ITEM),
        ),
        "MENU": _MENU_FUNCTIONS,
        "PFX": tuple(expand_class(("C_PARTICLEFX",), _G130_C_PARTICLEFX)),
        "SFX": tuple(expand_class(("C_SFX",), _MEMBERS_C_SFX)),
        "MUSIC": tuple(expand_class(("C_MUSICTHEME",), _MEMBERS_C_MUSICTHEME)),
    },
    "G2": {
        "CONTENT": (
            *_CONTENT_FUNCTIONS,
            *_G2_FUNCTIONS,
            *_content_classes(_G130_C_NPC + ("EFFECT",), _G130_C_ITEM + ("EFFECT",)),
        ),
        "MENU": _MENU_FUNCTIONS,
        "PFX": tuple(expand_class(("C_PARTICLEFX",), _G130_C_PARTICLEFX)),
        "SFX": tuple(expand_class(("C_SFX",), _MEMBERS_C_SFX)),
        "MUSIC": tuple(expand_class(("C_MUSICTHEME",), _MEMBERS_C_MUSICTHEME)),
    },
}

# ---------------------------------------------------------------------------
# Required symbols
# ---------------------------------------------------------------------------

_REQUIRED_CONTENT = ("C_NPC", "C_ITEM", "SELF", "OTHER", "VICTIM", "ITEM", "HERO")


def _ninja_helpers(patch_name: str) -> list[str]:
    return [
        "NINJA_SYMBOLS_START",
        f"NINJA_SYMBOLS_START_{patch_name}",
        "NINJA_VERSION",
        "NINJA_PATCHES",
        f"NINJA_ID_{patch_name}",
        "NINJA_MODNAME",
    ]


def required_names(unit_type: str, version: int, patch_name: str) -> list[str]:
    """Well-known globals for a root category plus the Ninja helper markers."""
    names: list[str] = []
    if unit_type == "CONTENT":
        names.extend(_REQUIRED_CONTENT)
        if version in (130, 2):
            names.append("INIT_GLOBAL")
        if version in (130, 2, 1):
            names.append("STARTUP_GLOBAL")
    elif unit_type == "MENU":
        names.append("MENU_MAIN")
    elif unit_type == "CAMERA":
        names.append("CAMMODNORMAL")
    names.extend(_ninja_helpers(patch_name.upper()))
    return [name.upper() for name in names]


def external_names(unit_type: str, version: int) -> tuple[str, ...]:
    """Engine externals for ``(type, version)``; empty when unknown."""
    return EXTERNALS.get(f"G{version}", {}).get(unit_type, ())


def builtin_symbols(names: tuple[str, ...] | list[str]) -> list[Symbol]:
    return [Symbol(name=name.upper(), source_file="", line=0) for name in names]


__all__ = [
    "EXTERNALS",
    "builtin_symbols",
    "expand_class",
    "external_names",
    "required_names",
]
