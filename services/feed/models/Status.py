from typing import Literal

from pydantic import BaseModel

FINISHED_TEXT = "Finished jobs. Refresh for new content."


class StatusNotice(BaseModel):
    """
    What the status area should show after one poll.

    state is "finished" exactly once, on the first idle poll after a busy one.
    """
    state: Literal["idle", "busy", "finished"]
    text: str = ""
    queue_length: int = 0
