import unittest

import pytest

from data_sources.error_handling import (
    EmptyFileError,
    ImporterStateError,
    MissingColumnError,
    NoValidRowsError,
)
from data_sources.external_index import (
    ExternalIndexImporter,
    ImportConfig,
    ImportState,
    detect_coordinate_columns,
    detect_delimiter,
    import_index_from_text,
    lookup_index_value,
    normalize_index_value,
)


def test_area_keyed_import():
    index = import_index_from_text(
        "area_name,score\nA,10\nB,20\n",
        ImportConfig(name="Score", value_column="score", area_column="area_name"),
        filename="scores.csv",
    )
    assert index.values == {"A": 10, "B": 20}
    assert index.min == 10
    assert index.max == 20
    assert index.source == "Imported from scores.csv"
    assert index.id.startswith("index-")
    assert index.color_scale == "sequential"


def test_missing_value_column():
    with pytest.raises(MissingColumnError) as excinfo:
        import_index_from_text("area_name,score\nA,10\n",
                               ImportConfig(name="X", value_column="rent"))
    assert str(excinfo.value) == 'Value column "rent" not found in CSV'
    assert excinfo.value.column == "rent"


def test_header_only_file_is_empty():
    with pytest.raises(EmptyFileError):
        import_index_from_text("area_name,score\n", ImportConfig(name="X", value_column="score"))
    with pytest.raises(EmptyFileError):
        import_index_from_text("", ImportConfig(name="X", value_column="score"))


def test_no_numeric_rows():
    with pytest.raises(NoValidRowsError):
        import_index_from_text("name,score\nA,n/a\nB,\n", ImportConfig(name="X", value_column="score"))


def test_row_keys_when_no_key_columns():
    index = import_index_from_text("score\n1\nx\n3\n", ImportConfig(name="X", value_column="score"))
    assert index.values == {"row-0": 1, "row-1": 3}


def test_coordinate_keys_rounded():
    index = import_index_from_text(
        "lat,lon,score\n40.7128,-74.006,5\nbad,-74,6\n37.1234567,-122.1,7\n",
        ImportConfig(name="X", value_column="score", lat_column="lat", lon_column="lon"),
    )
    assert index.values == {"40.712800,-74.006000": 5, "37.123457,-122.100000": 7}


def test_area_column_falls_back_to_coordinates_when_blank():
    index = import_index_from_text(
        "name,lat,lon,score\n,1.5,2.5,9\nTown,0,0,4\n",
        ImportConfig(name="X", value_column="score", area_column="name",
                     lat_column="lat", lon_column="lon"),
    )
    assert index.values == {"1.500000,2.500000": 9, "Town": 4}


def test_semicolon_tab_and_quotes():
    semicolon = import_index_from_text("area;score\nA;1.5\n",
                                       ImportConfig(name="X", value_column="score", area_column="area"))
    assert semicolon.values == {"A": 1.5}

    tab = import_index_from_text("area\tscore\nA\t2\n",
                                 ImportConfig(name="X", value_column="score", area_column="area"))
    assert tab.values == {"A": 2}

    quoted = import_index_from_text('"area","score"\n"North End","3"\n',
                                    ImportConfig(name="X", value_column="score", area_column="area"))
    assert quoted.values == {"North End": 3}


def test_mismatched_rows_and_non_finite_values_dropped():
    index = import_index_from_text(
        "area,score\nA,1\nB,2,extra\nC,inf\nD,4\n",
        ImportConfig(name="X", value_column="score", area_column="area"),
    )
    assert index.values == {"A": 1, "D": 4}


def test_stray_quote_only_affects_its_own_row():
    index = import_index_from_text(
        'area,score\n"A,1\nB,2\nC,3\n',
        ImportConfig(name="X", value_column="score", area_column="area"),
    )
    assert index.values == {"A": 1, "B": 2, "C": 3}


def test_malformed_rows_between_valid_rows_are_dropped():
    importer = ExternalIndexImporter()
    table = importer.parse('area,score\nA,1\n"B,2,"oops\nC,three\nD,4\nE\n')
    assert table.skipped_rows == 2

    index = importer.import_index(ImportConfig(name="X", value_column="score", area_column="area"))
    assert index.values == {"A": 1, "D": 4}
    assert importer.state == ImportState.IMPORTED


def test_detected_coordinate_columns_key_rows():
    index = import_index_from_text(
        "Latitude,Longitude,score\n40.7128,-74.006,5\n",
        ImportConfig(name="X", value_column="score"),
    )
    assert index.values == {"40.712800,-74.006000": 5}

    undetected = import_index_from_text(
        "Latitude,Longitude,score\n40.7128,-74.006,5\n",
        ImportConfig(name="X", value_column="score", detect_coordinates=False),
    )
    assert undetected.values == {"row-0": 5}


def test_detect_delimiter():
    assert detect_delimiter("a\tb,c") == "\t"
    assert detect_delimiter("a;b") == ";"
    assert detect_delimiter("a;b,c") == ","
    assert detect_delimiter("a") == ","


def test_detect_coordinate_columns():
    assert detect_coordinate_columns(["Name", "Latitude", "Longitude"]) == ("Latitude", "Longitude")
    assert detect_coordinate_columns(["x", "y", "value"]) == ("y", "x")
    assert detect_coordinate_columns(["name", "value"]) == (None, None)


def test_lookup_and_normalize():
    index = import_index_from_text(
        "area,lat,lon,score\nA,1,2,10\n",
        ImportConfig(name="X", value_column="score", area_column="area"),
    )
    assert lookup_index_value(index, area_name="A") == 10
    assert lookup_index_value(index, area_name="Z") is None
    assert normalize_index_value(index, 10) == 0.5

    by_coords = import_index_from_text(
        "lat,lon,score\n1,2,10\n3,4,30\n",
        ImportConfig(name="X", value_column="score", lat_column="lat", lon_column="lon"),
    )
    assert lookup_index_value(by_coords, lat=3, lon=4) == 30
    assert normalize_index_value(by_coords, 20) == 0.5
    assert normalize_index_value(by_coords, 50) == 1.0


class TestImporterStateMachine(unittest.TestCase):

    def test_happy_path(self):
        importer = ExternalIndexImporter("data.csv")
        self.assertEqual(importer.state, ImportState.UNINGESTED)

        table = importer.parse("area,score\nA,1\n")
        self.assertEqual(importer.state, ImportState.PARSED)
        self.assertEqual(table.headers, ["area", "score"])
        self.assertEqual(importer.headers, ["area", "score"])

        index = importer.import_index(ImportConfig(name="X", value_column="score", area_column="area"))
        self.assertEqual(importer.state, ImportState.IMPORTED)
        self.assertIs(importer.index, index)

    def test_import_before_parse(self):
        importer = ExternalIndexImporter()
        with self.assertRaises(ImporterStateError):
            importer.import_index(ImportConfig(name="X", value_column="score"))

    def test_parse_twice(self):
        importer = ExternalIndexImporter()
        importer.parse("a,b\n1,2\n")
        with self.assertRaises(ImporterStateError):
            importer.parse("a,b\n1,2\n")

    def test_failure_is_terminal(self):
        importer = ExternalIndexImporter()
        importer.parse("a,b\n1,2\n")
        with self.assertRaises(MissingColumnError):
            importer.import_index(ImportConfig(name="X", value_column="c"))
        self.assertEqual(importer.state, ImportState.FAILED)
        self.assertIsInstance(importer.error, MissingColumnError)
        with self.assertRaises(ImporterStateError):
            importer.import_index(ImportConfig(name="X", value_column="b"))

    def test_empty_file_fails(self):
        importer = ExternalIndexImporter()
        with self.assertRaises(EmptyFileError):
            importer.parse("only-a-header\n")
        self.assertEqual(importer.state, ImportState.FAILED)


if __name__ == "__main__":
    unittest.main()
