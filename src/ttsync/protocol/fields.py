"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling. The
outbound and inbound discriminants share the same integer space but not
the same meaning; 1 is a reload request going out, and a reload-complete
answer coming in.
"""

DISCRIMINANT = "messageID"

# Outbound (editor -> host)
GET_SCRIPTS = 0
RELOAD = 1
CUSTOM_MESSAGE = 2
EXECUTE = 3

# Inbound (host -> editor)
NEW_OBJECT = 0
RELOAD_COMPLETE = 1
PRINT = 2
ERROR = 3
CUSTOM_NOTIFICATION = 4
RETURN = 5
GAME_SAVED = 6
OBJECT_CREATED = 7

# Payload keys
SAVE_PATH = "savePath"
SCRIPT_STATES = "scriptStates"
CUSTOM = "customMessage"
RETURN_ID = "returnID"
RETURN_VALUE = "returnValue"
GUID = "guid"
SCRIPT = "script"
UI = "ui"
NAME = "name"
MESSAGE = "message"
ERROR_TEXT = "error"
ERROR_PREFIX = "errorMessagePrefix"
