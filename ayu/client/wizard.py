from dataclasses import dataclass, field
from datetime import date

GENDERS = ("Male", "Female", "Other")

STEPS = (
    {"id": 1, "title": "About you"},
    {"id": 2, "title": "Body stats"},
    {"id": 3, "title": "Review"},
)


def _to_float(value) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_date(value) -> date | None:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


@dataclass
class GettingStartedForm:
    gender: str = ""
    dob: str = ""
    height: str = ""  # cm
    weight: str = ""  # kg
    touched: set = field(default_factory=set)


class GettingStartedWizard:
    def __init__(self, today: date | None = None):
        self.form = GettingStartedForm()
        self.step_index = 0
        self._today = today

    @property
    def steps(self):
        return STEPS

    @property
    def today(self) -> date:
        return self._today or date.today()

    def set(self, name: str, value) -> None:
        if name not in ("gender", "dob", "height", "weight"):
            raise KeyError(name)
        setattr(self.form, name, value)
        self.form.touched.add(name)

    def _about_valid(self) -> bool:
        born = _to_date(self.form.dob)
        return self.form.gender in GENDERS and born is not None and born <= self.today

    def _body_valid(self) -> bool:
        height = _to_float(self.form.height)
        weight = _to_float(self.form.weight)
        return (
            height is not None and weight is not None
            and 40 < height < 300 and 10 < weight < 500
        )

    def step_valid(self, index: int | None = None) -> bool:
        index = self.step_index if index is None else index
        validators = (self._about_valid, self._body_valid, lambda: True)
        return validators[index]()

    def errors(self) -> dict:
        """Field messages for the current step, shown once a field is touched."""
        messages = {}
        touched = self.form.touched
        if self.step_index == 0:
            if "gender" in touched and self.form.gender not in GENDERS:
                messages["gender"] = "Please choose a gender."
            born = _to_date(self.form.dob)
            if "dob" in touched and (born is None or born > self.today):
                messages["dob"] = "Enter a valid date of birth."
        elif self.step_index == 1:
            height = _to_float(self.form.height)
            weight = _to_float(self.form.weight)
            if "height" in touched and not (height is not None and 40 < height < 300):
                messages["height"] = "Height must be between 40 and 300 cm."
            if "weight" in touched and not (weight is not None and 10 < weight < 500):
                messages["weight"] = "Weight must be between 10 and 500 kg."
        return messages

    @property
    def is_last_step(self) -> bool:
        return self.step_index == len(STEPS) - 1

    def next(self) -> bool:
        if not self.step_valid() or self.is_last_step:
            return False
        self.step_index += 1
        return True

    def back(self) -> None:
        self.step_index = max(0, self.step_index - 1)

    def jump(self, index: int) -> bool:
        if not 0 <= index < len(STEPS):
            return False
        if all(self.step_valid(i) for i in range(index)):
            self.step_index = index
            return True
        return False

    @property
    def complete(self) -> bool:
        return all(self.step_valid(i) for i in range(len(STEPS)))

    def payload(self) -> dict:
        return {
            "gender": self.form.gender,
            "dob": _to_date(self.form.dob).isoformat(),
            "height": _to_float(self.form.height),
            "weight": _to_float(self.form.weight),
        }
