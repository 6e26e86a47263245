from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LessonPlanContext(BaseModel):
    """Form field values for one submission. Everything is read as a string."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    teacher_name: str = ""
    school: str = ""
    school_year: str = ""
    subject: str = ""
    element: str = ""
    quarter: str = ""
    week: str = ""

    content_standards: str = ""
    performance_standards: str = ""
    learning_competencies: str = ""
    content: str = ""
    integration: str = ""
    materials: str = ""

    def render(self) -> str:
        """The shared context every section prompt starts with."""
        return (
            "Gagawa ka ng lesson plan sa Filipino para sa EPP 5.\n"
            f"Elemento: {self.element} | Markahan: {self.quarter} | Linggo: {self.week}\n"
            f"Nilalaman (Topic): {self.content}\n"
            f"Pamantayang Pangnilalaman: {self.content_standards}\n"
            f"Kasanayan at Layunin: {self.learning_competencies}\n"
            "Tandaan: Ang lahat ng output ay dapat nakasulat sa Wikang Filipino.\n"
        )
