"""Tests for the Arkmap backend API."""


class TestHealth:
    """Tests for the informational endpoints."""

    def test_root(self, api_client):
        """Test the health check."""
        response = api_client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_config(self, api_client):
        """Test the effective layout config is exposed."""
        data = api_client.get("/api/config").json()
        assert data["default_direction"] == "east"
        assert data["collision_nudge"] == [0.5, 0.5, 0]
        assert "column_spacing" in data


class TestLayoutEndpoint:
    """Tests for POST /api/layout."""

    def test_ground_floor(self, api_client, sample_world):
        """Test the default floor is returned with positions and edges."""
        response = api_client.post("/api/layout", json=sample_world)
        assert response.status_code == 200

        data = response.json()
        assert data["selected_floor"] == 0
        assert data["floors"] == [1, 0]
        assert {r["id"] for r in data["rooms"]} == {"gate", "square", "shrine"}

        shrine = next(r for r in data["rooms"] if r["id"] == "shrine")
        assert shrine["pixel_position"] == {"x": 900, "y": 40}
        assert shrine["grid_coordinates"]["z"] == 0

        pairs = {(e["source_room_id"], e["target_room_id"]) for e in data["edges"]}
        assert pairs == {("gate", "square"), ("shrine", "square")}
        assert data["stats"]["components"] == 1

    def test_upper_floor(self, api_client, sample_world):
        """Test requesting floor 1."""
        data = api_client.post("/api/layout", json={**sample_world, "floor": 1}).json()

        assert [r["id"] for r in data["rooms"]] == ["tower"]
        assert data["edges"] == []

    def test_missing_room_id(self, api_client):
        """Test malformed rooms are rejected with 422."""
        response = api_client.post("/api/layout", json={"rooms": [{"name": "x"}], "exits": []})
        assert response.status_code == 422
        assert "no id" in response.json()["detail"]

    def test_empty_world(self, api_client):
        """Test an empty world lays out to nothing."""
        data = api_client.post("/api/layout", json={}).json()
        assert data["rooms"] == []
        assert data["floors"] == []

    def test_palette_shared_between_requests(self, api_client, backend, sample_world):
        """Test region colours chosen once are reused by later layouts."""
        first = api_client.post("/api/layout", json=sample_world).json()
        gate_colors = next(r for r in first["rooms"] if r["id"] == "gate")["colors"]

        # A world where Old Town is no longer the first region seen
        second = api_client.post("/api/layout", json={
            "rooms": [
                {"id": "hut", "region_name": "Marsh"},
                {"id": "gate", "region_name": "Old Town"},
            ],
            "exits": [],
        }).json()

        assert next(r for r in second["rooms"] if r["id"] == "gate")["colors"] == gate_colors
        assert len(backend.palette_cache) == 3


class TestRegionColors:
    """Tests for the region colour endpoints."""

    def test_unknown_region(self, api_client):
        """Test a region with no cached colours is a 404."""
        assert api_client.get("/api/regions/Nowhere/colors").status_code == 404

    def test_seed_and_read(self, api_client):
        """Test seeding a region and reading it back."""
        body = {
            "region": "The Docks",
            "border_color": "#123456",
            "font_color": "#abcdef",
            "accent_color": "rgba(18, 52, 86, 0.14)",
        }
        assert api_client.post("/api/regions/colors", json=body).status_code == 200

        data = api_client.get("/api/regions/the docks/colors").json()
        assert data["border_color"] == "#123456"

    def test_seed_does_not_overwrite(self, api_client):
        """Test an existing entry is kept."""
        body = {
            "region": "Docks",
            "border_color": "#111111",
            "font_color": "#eeeeee",
            "accent_color": "rgba(17, 17, 17, 0.14)",
        }
        api_client.post("/api/regions/colors", json=body)
        stored = api_client.post("/api/regions/colors", json={**body, "border_color": "#222222"}).json()

        assert stored["border_color"] == "#111111"

    def test_seeded_colours_used_in_layout(self, api_client):
        """Test a seeded scheme is applied to that region's rooms."""
        api_client.post("/api/regions/colors", json={
            "region": "Docks",
            "border_color": "#123456",
            "font_color": "#abcdef",
            "accent_color": "rgba(18, 52, 86, 0.14)",
        })
        data = api_client.post("/api/layout", json={
            "rooms": [{"id": "pier", "region_name": "docks"}],
            "exits": [],
        }).json()

        assert data["rooms"][0]["colors"]["border_color"] == "#123456"
