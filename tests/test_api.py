import unittest

from fastapi.testclient import TestClient

import main


def _area(area_id, food_count, area_km2=1.0):
    return {
        "area_id": area_id,
        "name": area_id.title(),
        "area_km2": area_km2,
        "layers": {
            "poi-food-drink": {"feature_count": food_count},
            "roads-residential": {"feature_count": 10, "total_length_m": 8000},
        },
    }


class TestUrbanMetricsAPI(unittest.TestCase):
    """
    Transport tests: the engine is pure, so no network or fixtures are needed.
    """

    def setUp(self):
        self.client = TestClient(main.app)
        main.EXTERNAL_INDICES.clear()

    def test_root_and_health(self):
        root = self.client.get("/").json()
        self.assertEqual(root["status"], "running")
        self.assertEqual(len(root["metrics"]), 9)

        health = self.client.get("/health")
        self.assertEqual(health.status_code, 200)
        self.assertEqual(health.json()["status"], "healthy")

    def test_definitions(self):
        definitions = self.client.get("/definitions").json()["definitions"]
        self.assertEqual(len(definitions), 9)
        transit = next(d for d in definitions if d["id"] == "transit_coverage")
        self.assertEqual(transit["thresholds"], {"low": 25, "high": 50})

    def test_score_single_area(self):
        response = self.client.post("/areas/score", json={"areas": [_area("downtown", 300)]})
        self.assertEqual(response.status_code, 200)
        body = response.json()

        self.assertEqual(len(body["areas"]), 1)
        area = body["areas"][0]
        self.assertEqual(area["poi_metrics"]["density"], 300)
        self.assertEqual(len(area["derived_metrics"]), 9)
        self.assertIn("interpretation", area["derived_metrics"][0])
        self.assertNotIn("comparison", body)
        self.assertEqual(body["insights"][0]["title"], "High Amenity Density")

    def test_score_two_areas_adds_comparison(self):
        response = self.client.post("/areas/score", json={"areas": [_area("a", 300), _area("b", 100)]})
        body = response.json()

        self.assertEqual([a["area_id"] for a in body["areas"]], ["a", "b"])
        density = next(c for c in body["comparison"]["poi_metrics"] if c["metric_id"] == "density")
        self.assertEqual(density["delta"], 200)
        self.assertEqual(density["delta_indicator"], "▲▲")
        self.assertEqual(len(body["comparison"]["derived_metrics"]), 9)
        self.assertEqual(body["insights"][0]["title"], "Significant Density Difference")

    def test_score_requires_areas(self):
        response = self.client.post("/areas/score", json={"areas": []})
        self.assertEqual(response.status_code, 400)

    def test_import_list_and_delete(self):
        response = self.client.post("/indices/import", json={
            "text": "area_name,score\nA,10\nB,20\n",
            "filename": "scores.csv",
            "name": "Score",
            "value_column": "score",
            "area_column": "area_name",
        })
        self.assertEqual(response.status_code, 200)
        index = response.json()
        self.assertEqual(index["values"], {"A": 10, "B": 20})
        self.assertEqual(index["min"], 10)
        self.assertEqual(index["max"], 20)

        listed = self.client.get("/indices").json()["indices"]
        self.assertEqual([i["id"] for i in listed], [index["id"]])

        self.assertEqual(self.client.delete(f"/indices/{index['id']}").status_code, 200)
        self.assertEqual(self.client.get("/indices").json()["indices"], [])
        self.assertEqual(self.client.delete(f"/indices/{index['id']}").status_code, 404)

    def test_import_missing_column(self):
        response = self.client.post("/indices/import", json={
            "text": "area_name,score\nA,10\n",
            "name": "Rent",
            "value_column": "rent",
        })
        self.assertEqual(response.status_code, 400)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "MissingColumnError")
        self.assertEqual(detail["column"], "rent")

    def test_import_empty_file(self):
        response = self.client.post("/indices/import", json={
            "text": "score\n",
            "name": "Empty",
            "value_column": "score",
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["error_type"], "empty_file")


if __name__ == "__main__":
    unittest.main()
