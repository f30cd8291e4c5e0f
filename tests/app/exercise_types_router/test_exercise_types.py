"""Test the /exercise-types endpoints."""

from fastapi.testclient import TestClient

from tonnage.models import ExerciseTemplate
from tests.app.conftest import TEST_USER


DIP = ExerciseTemplate(
    id="dip_001",
    title="Dip (Assisted)",
    hevy_type="bodyweight_assisted_reps",
    exercise_type="bodyweight_assisted",
    primary_muscle_group="triceps",
)


def test_list_templates(auth_client: TestClient, storage):
    storage.get_templates.return_value = [DIP]

    response = auth_client.get("/exercise-types")

    assert response.status_code == 200
    assert response.json()[0]["exercise_type"] == "bodyweight_assisted"


class TestUpdateExerciseType:
    """Test PUT /exercise-types/{template_id}."""

    def test_override_recomputes(self, auth_client: TestClient, storage, orchestrator):
        storage.set_exercise_type.return_value = DIP.model_copy(
            update={"exercise_type": "bodyweight"}
        )

        response = auth_client.put(
            "/exercise-types/dip_001", json={"exercise_type": "bodyweight"}
        )

        assert response.status_code == 200
        assert response.json()["exercise_type"] == "bodyweight"
        storage.set_exercise_type.assert_called_once_with(
            TEST_USER.id, "dip_001", "bodyweight"
        )
        orchestrator.recompute.assert_called_once_with(TEST_USER.id)

    def test_unknown_template(self, auth_client: TestClient, storage, orchestrator):
        storage.set_exercise_type.return_value = None

        response = auth_client.put(
            "/exercise-types/nope", json={"exercise_type": "bodyweight"}
        )

        assert response.status_code == 404
        orchestrator.recompute.assert_not_called()

    def test_rejects_unknown_type(self, auth_client: TestClient, storage):
        response = auth_client.put(
            "/exercise-types/dip_001", json={"exercise_type": "duration"}
        )

        assert response.status_code == 422
        storage.set_exercise_type.assert_not_called()
