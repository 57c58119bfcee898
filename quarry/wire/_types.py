from collections.abc import Callable
from typing import Any

from quarry.wire.codecs.rrc import RequestResponseCodec
from quarry.wire.triggers.http import HTTPRouteTrigger


type Trigger = HTTPRouteTrigger
type Codec = RequestResponseCodec
type Exposure = tuple[Trigger, Codec]

type ContextProvider = Callable[[], Any]
"""Called once per request; the result becomes scope.context."""
