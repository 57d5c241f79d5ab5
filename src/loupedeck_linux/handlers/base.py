"""Common interface of the physical-control handlers."""


class InputHandler:
    """
    Handles knob and button events.

    Each method returns True when the handler consumed the event. The
    application runs every handler for every event as its own task, so a
    handler must ignore knobs it is not assigned to. Returning True does
    not keep the event from the other handlers.
    """

    async def handle_rotate(self, knob_id: str, delta: int) -> bool:
        return False

    async def handle_knob_down(self, knob_id: str) -> bool:
        return False

    async def handle_button_down(self, button_id: int) -> bool:
        return False
