# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from replfmt.frames import CapturedFrame


class ObjectFilter:
    """
    Decides which stack frames and which members of objects are shown to the user.

    Hosts can derive from this class to hide more, e.g. the frames of their own driver
    code.
    """

    def is_visible(self, frame: "CapturedFrame") -> bool:
        # Generated frames are flagged at capture time, not recognized by name.
        return not frame.is_generated

    def is_visible_member(self, owner: object, name: str) -> bool:
        return not (name.startswith("__") and name.endswith("__"))
