import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Sandbox = "sandbox"
    Test = "test"
    Local = "local"


class QuestionType(enum.Enum):
    MCQ = "MCQ"
    TrueFalse = "TrueFalse"
    FillBlanks = "FillBlanks"
    ShortAnswer = "ShortAnswer"
    Descriptive = "Descriptive"

    @property
    def points(self) -> int:
        """Maximum points a question of this type is worth."""
        return QuestionPoints[self]


QuestionPoints: dict[QuestionType, int] = {
    QuestionType.MCQ: 2,
    QuestionType.TrueFalse: 1,
    QuestionType.FillBlanks: 2,
    QuestionType.ShortAnswer: 5,
    QuestionType.Descriptive: 5,
}


class Performance(enum.Enum):
    Good = "Good"
    NeedsImprovement = "Needs Improvement"
