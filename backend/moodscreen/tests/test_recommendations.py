from moodscreen.services.recommendations import Recommendations, recommend
from moodscreen.services.scoring import SeverityBand


def test_recommendation_table_by_band() -> None:
    assert recommend(SeverityBand.MINIMAL) == Recommendations(
        immediate=["Continue maintaining healthy habits", "Regular exercise and sleep schedule"],
        professional=[],
        resources=["Mental wellness apps", "Stress management techniques"],
    )
    assert recommend("mild").professional == ["Consider counseling sessions"]
    assert recommend(SeverityBand.MODERATE).immediate == [
        "Daily mood tracking",
        "Structured activity scheduling",
        "Breathing exercises",
    ]
    assert recommend(SeverityBand.MODERATELY_SEVERE) == recommend(SeverityBand.SEVERE)
    assert recommend(SeverityBand.SEVERE).professional[0] == "Urgent psychiatric evaluation"


def test_recommendations_are_independent_copies() -> None:
    first = recommend(SeverityBand.SEVERE)
    first.immediate.append("mutated")
    assert "mutated" not in recommend(SeverityBand.SEVERE).immediate
