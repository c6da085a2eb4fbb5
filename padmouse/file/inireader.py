import configparser
from pathlib import Path


class IniReader:
    """configparser wrapper: inline ; and # comments, case kept, typed getters with fallbacks."""

    def __init__(self, path=None):
        self.path = Path(path) if path else None
        self.cfg = configparser.ConfigParser(inline_comment_prefixes=(";", "#"))
        self.cfg.optionxform = str  # preserve case
        if self.path is not None:
            self.cfg.read(self.path, encoding="utf-8")

    @classmethod
    def from_string(cls, text: str) -> "IniReader":
        reader = cls()
        reader.cfg.read_string(text)
        return reader

    def _clean(self, val: str) -> str:
        if val is None:
            return ""
        # cut at first ; or #
        for sep in (";", "#"):
            if sep in val:
                val = val.split(sep, 1)[0]
        return val.strip()

    def get_str(self, section: str, option: str, fallback: str = "") -> str:
        if self.cfg.has_option(section, option):
            return self._clean(self.cfg.get(section, option, fallback=fallback))
        return fallback

    def get_float(self, section: str, option: str, fallback: float = 0.0) -> float:
        try:
            return float(self.get_str(section, option, str(fallback)))
        except ValueError:
            return fallback

    def get_bool(self, section: str, option: str, fallback: bool = False) -> bool:
        val = self.get_str(section, option, str(fallback))
        return val.lower() in ("1", "yes", "true", "on")
