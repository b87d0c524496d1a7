"""Mock response store.

The mock value is what every simulated request returns. It is edited as
text; the live value only changes when a draft is committed and parses as
JSON.
"""

import copy
import json
import logging
from typing import Any, Optional

DEFAULT_MOCK_RESPONSE = {
    "id": 1,
    "name": "John Doe",
    "email": "john@example.com",
    "profile": {
        "age": 30,
        "preferences": ["coding", "coffee", "travel"],
        "settings": {
            "theme": "dark",
            "notifications": True,
        },
    },
}


def dump_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


class MockResponseStore:
    """Holds the live mock value and the text being edited for it

    Args:
        value: Initial mock value; defaults to a sample user document
    """

    def __init__(self, value: Any = None):
        self._value = copy.deepcopy(DEFAULT_MOCK_RESPONSE) if value is None else value
        self.text = dump_json(self._value)

    @property
    def value(self) -> Any:
        return self._value

    def commit(self, text: Optional[str] = None) -> dict:
        """Parse ``text`` (or the current draft) and make it the live value

        Returns:
            Dict with success flag and message; on failure the live value is
            left unchanged and the message carries the parse error
        """
        if text is not None:
            self.text = text
        try:
            parsed = json.loads(self.text)
        except (TypeError, ValueError) as e:
            logging.warning(f"[MockStore] Invalid JSON: {e}")
            return {"success": False, "message": f"Invalid JSON: {e}"}

        self._value = parsed
        logging.info("[MockStore] Mock response updated")
        return {"success": True, "message": "Mock response updated"}

    def reset_text(self) -> str:
        """Discard the draft and re-render it from the live value"""
        self.text = dump_json(self._value)
        return self.text


__all__ = [
    "DEFAULT_MOCK_RESPONSE",
    "MockResponseStore",
    "dump_json",
]
