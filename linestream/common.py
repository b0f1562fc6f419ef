DEFAULT_SEPARATOR = "\n"
DEFAULT_ENCODING = "utf-8"
DEFAULT_READ_CHUNK_SIZE = 1024
DEFAULT_READ_RETRY_DELAY = 0.05

class DeviceState:
    CLOSED = 0
    OPENING = 1
    OPEN = 2
    CLOSING = 3

    NAMES = ["closed", "opening", "open", "closing"]

    @classmethod
    def name_of(cls, state):
        return cls.NAMES[state]
