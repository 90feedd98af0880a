# Reserved events emitted by the emitter itself
NEW_LISTENER = "newListener"
REMOVE_LISTENER = "removeListener"

DEFAULT_MAX_LISTENERS = 10
