from dataclasses import dataclass
from typing import Literal


type Method = Literal["GET", "POST"]
type Path = str


@dataclass(frozen=True, slots=True)
class HTTPRouteTrigger:
    method: Method
    path: Path
