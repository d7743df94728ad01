"""
Unit tests for the point-of-interest endpoints (in-memory repository).
"""

import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

BASE = "/api/cities/{city_id}/pointsofinterest"


def _url(city_id: int, point_id: int | None = None) -> str:
    url = BASE.format(city_id=city_id)
    return url if point_id is None else f"{url}/{point_id}"


class TestClaimPolicy:
    def test_antwerp_claim_is_accepted(self, client: TestClient, auth_headers) -> None:
        response = client.get(_url(1), headers=auth_headers("Antwerp"))

        assert response.status_code == 200

    def test_other_city_claim_is_forbidden(self, client: TestClient, auth_headers) -> None:
        response = client.get(_url(1), headers=auth_headers("Paris"))

        assert response.status_code == 403

    def test_other_city_claim_cannot_write(self, client: TestClient, auth_headers, repository) -> None:
        response = client.delete(_url(1, 1), headers=auth_headers("Paris"))

        assert response.status_code == 403
        assert 1 in repository.points

    def test_missing_token_is_unauthorized(self, client: TestClient) -> None:
        response = client.get(_url(1))

        assert response.status_code == 401


class TestRead:
    def test_list_for_city(self, client: TestClient, auth_headers) -> None:
        response = client.get(_url(1), headers=auth_headers())

        assert response.json() == [
            {"id": 1, "name": "Central Park", "description": "The most visited urban park."},
            {"id": 2, "name": "Empire State Building", "description": "A 102-story skyscraper."},
        ]

    def test_list_for_unknown_city_returns_404(self, client: TestClient, auth_headers, caplog) -> None:
        with caplog.at_level("INFO", logger="cityinfo.points_of_interest.service"):
            response = client.get(_url(42), headers=auth_headers())

        assert response.status_code == 404
        assert "City with id 42 wasn't found" in caplog.text

    def test_single_point(self, client: TestClient, auth_headers) -> None:
        response = client.get(_url(2, 4), headers=auth_headers())

        assert response.json() == {"id": 4, "name": "Antwerp Central Station", "description": None}

    def test_point_of_another_city_is_not_found(self, client: TestClient, auth_headers) -> None:
        # Point 5 exists, but belongs to Paris (3).
        response = client.get(_url(1, 5), headers=auth_headers())

        assert response.status_code == 404

    def test_unknown_point_returns_404(self, client: TestClient, auth_headers) -> None:
        response = client.get(_url(1, 999), headers=auth_headers())

        assert response.status_code == 404


class TestCreate:
    def test_create_then_fetch_round_trip(self, client: TestClient, auth_headers) -> None:
        payload = {"name": "Rubens House", "description": "Home and studio of Peter Paul Rubens."}

        response = client.post(_url(2), json=payload, headers=auth_headers())

        assert response.status_code == 201
        created = response.json()
        assert created["name"] == payload["name"]
        assert created["description"] == payload["description"]
        assert response.headers["Location"].endswith(_url(2, created["id"]))

        fetched = client.get(_url(2, created["id"]), headers=auth_headers()).json()
        assert (fetched["name"], fetched["description"]) == (payload["name"], payload["description"])

    def test_description_is_optional(self, client: TestClient, auth_headers) -> None:
        response = client.post(_url(2), json={"name": "MAS"}, headers=auth_headers())

        assert response.status_code == 201
        assert response.json()["description"] is None

    def test_unknown_city_returns_404(self, client: TestClient, auth_headers, repository) -> None:
        response = client.post(_url(42), json={"name": "Nowhere"}, headers=auth_headers())

        assert response.status_code == 404
        assert repository.save_count == 0

    def test_missing_name_returns_400(self, client: TestClient, auth_headers) -> None:
        response = client.post(_url(2), json={"description": "No name"}, headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"

    def test_blank_name_returns_400(self, client: TestClient, auth_headers) -> None:
        response = client.post(_url(2), json={"name": "   "}, headers=auth_headers())

        assert response.status_code == 400

    def test_name_longer_than_fifty_returns_400(self, client: TestClient, auth_headers) -> None:
        response = client.post(_url(2), json={"name": "x" * 51}, headers=auth_headers())

        assert response.status_code == 400

    def test_description_longer_than_two_hundred_returns_400(self, client: TestClient, auth_headers) -> None:
        response = client.post(_url(2), json={"name": "ok", "description": "x" * 201}, headers=auth_headers())

        assert response.status_code == 400

    @pytest.mark.parametrize("payload", [{"name": "a\x01b"}, {"name": "ok", "description": "line\x0bbreak"}])
    def test_control_characters_return_400(self, client: TestClient, auth_headers, repository, payload) -> None:
        response = client.post(_url(2), json=payload, headers=auth_headers())

        assert response.status_code == 400
        assert repository.save_count == 0

    def test_created_point_renders_as_well_formed_xml(self, client: TestClient, auth_headers) -> None:
        payload = {"name": "Het Steen", "description": "Fortress\tby the\nScheldt."}
        created = client.post(_url(2), json=payload, headers=auth_headers()).json()

        response = client.get(_url(2, created["id"]), headers={**auth_headers(), "Accept": "application/xml"})

        assert response.status_code == 200
        root = ET.fromstring(response.content)
        assert root.findtext("description") == "Fortress\tby the\nScheldt."


class TestUpdate:
    def test_full_update(self, client: TestClient, auth_headers, repository) -> None:
        response = client.put(
            _url(2, 3),
            json={"name": "Onze-Lieve-Vrouwekathedraal", "description": None},
            headers=auth_headers(),
        )

        assert response.status_code == 204
        assert repository.points[3].name == "Onze-Lieve-Vrouwekathedraal"
        assert repository.points[3].description is None

    def test_invalid_body_returns_400(self, client: TestClient, auth_headers, repository) -> None:
        response = client.put(_url(2, 3), json={"name": ""}, headers=auth_headers())

        assert response.status_code == 400
        assert repository.points[3].name == "Cathedral of Our Lady"

    def test_point_of_another_city_returns_404(self, client: TestClient, auth_headers, repository) -> None:
        response = client.put(_url(2, 5), json={"name": "Hijacked"}, headers=auth_headers())

        assert response.status_code == 404
        assert repository.points[5].name == "Eiffel Tower"


class TestPartialUpdate:
    def test_replace_name(self, client: TestClient, auth_headers, repository) -> None:
        patch = [{"op": "replace", "path": "/name", "value": "Cathedral"}]

        response = client.patch(_url(2, 3), json=patch, headers=auth_headers())

        assert response.status_code == 204
        assert repository.points[3].name == "Cathedral"
        assert repository.points[3].description == "A Gothic style cathedral."

    def test_json_patch_media_type_is_accepted(self, client: TestClient, auth_headers, repository) -> None:
        response = client.patch(
            _url(2, 4),
            content='[{"op": "add", "path": "/description", "value": "Railway cathedral."}]',
            headers={**auth_headers(), "Content-Type": "application/json-patch+json"},
        )

        assert response.status_code == 204
        assert repository.points[4].description == "Railway cathedral."

    def test_remove_description(self, client: TestClient, auth_headers, repository) -> None:
        response = client.patch(_url(2, 3), json=[{"op": "remove", "path": "/description"}], headers=auth_headers())

        assert response.status_code == 204
        assert repository.points[3].description is None

    def test_empty_name_is_rejected_and_nothing_changes(self, client: TestClient, auth_headers, repository) -> None:
        patch = [
            {"op": "replace", "path": "/description", "value": "Changed"},
            {"op": "replace", "path": "/name", "value": ""},
        ]

        response = client.patch(_url(2, 3), json=patch, headers=auth_headers())

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"
        assert repository.points[3].name == "Cathedral of Our Lady"
        assert repository.points[3].description == "A Gothic style cathedral."
        assert repository.save_count == 0

    def test_unknown_path_is_rejected(self, client: TestClient, auth_headers, repository) -> None:
        patch = [{"op": "replace", "path": "/cityId", "value": 1}]

        response = client.patch(_url(2, 3), json=patch, headers=auth_headers())

        assert response.status_code == 400
        assert repository.points[3].city_id == 2
        assert repository.save_count == 0

    def test_control_character_in_value_is_rejected(self, client: TestClient, auth_headers, repository) -> None:
        patch = [{"op": "replace", "path": "/name", "value": "Cathedral\x00"}]

        response = client.patch(_url(2, 3), json=patch, headers=auth_headers())

        assert response.status_code == 400
        assert repository.points[3].name == "Cathedral of Our Lady"
        assert repository.save_count == 0

    def test_unsupported_op_is_rejected(self, client: TestClient, auth_headers) -> None:
        patch = [{"op": "move", "path": "/name", "from": "/description"}]

        response = client.patch(_url(2, 3), json=patch, headers=auth_headers())

        assert response.status_code == 400

    def test_unknown_point_returns_404(self, client: TestClient, auth_headers) -> None:
        patch = [{"op": "replace", "path": "/name", "value": "x"}]

        response = client.patch(_url(2, 999), json=patch, headers=auth_headers())

        assert response.status_code == 404


class TestDelete:
    def test_delete_sends_notification(self, client: TestClient, auth_headers, repository, mail_service) -> None:
        response = client.delete(_url(1, 2), headers=auth_headers())

        assert response.status_code == 204
        assert 2 not in repository.points
        mail_service.send.assert_called_once_with(
            "Point of interest deleted.",
            "Point of interest Empire State Building with ID 2 was deleted.",
        )

    def test_deleted_point_is_gone(self, client: TestClient, auth_headers) -> None:
        client.delete(_url(1, 2), headers=auth_headers())

        response = client.get(_url(1, 2), headers=auth_headers())

        assert response.status_code == 404

    def test_unknown_point_sends_nothing(self, client: TestClient, auth_headers, mail_service) -> None:
        response = client.delete(_url(1, 5), headers=auth_headers())

        assert response.status_code == 404
        mail_service.send.assert_not_called()


class TestIdRange:
    def test_city_id_beyond_integer_range_returns_400(self, client: TestClient, auth_headers) -> None:
        response = client.get(_url(3_000_000_000), headers=auth_headers())

        assert response.status_code == 400

    def test_point_id_beyond_integer_range_returns_400(self, client: TestClient, auth_headers, repository) -> None:
        response = client.delete(_url(2, 3_000_000_000), headers=auth_headers())

        assert response.status_code == 400
        assert repository.save_count == 0

    def test_create_under_out_of_range_city_returns_400(self, client: TestClient, auth_headers, repository) -> None:
        response = client.post(_url(2_147_483_648), json={"name": "Nowhere"}, headers=auth_headers())

        assert response.status_code == 400
        assert repository.save_count == 0
