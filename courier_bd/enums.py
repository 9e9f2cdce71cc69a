from enum import Enum


class Provider(Enum):
    Pathao = "pathao"
    Steadfast = "steadfast"
    Redx = "redx"

    @property
    def label(self) -> str:
        return self.name
