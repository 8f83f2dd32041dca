from __future__ import annotations

from datetime import datetime

import piexif

from photoboard.services.exif_query import (
	EXIF_DUMP_HEADER,
	describe_exif,
	extract_capture_timestamp,
	extract_exif_details,
	extract_gps_block,
	has_meaningful_data,
	parse_exif_datetime,
)


def test_has_meaningful_data() -> None:
	assert has_meaningful_data(None) is False
	assert has_meaningful_data({}) is False
	assert has_meaningful_data({"0th": {}, "Exif": {}, "thumbnail": b""}) is False
	assert has_meaningful_data({"Exif": {1: "x"}}) is True
	assert has_meaningful_data({"thumbnail": b"\xff\xd8"}) is True


def test_capture_timestamp_prefers_date_time_original() -> None:
	doc = {
		"0th": {piexif.ImageIFD.DateTime: b"2021:01:01 00:00:00"},
		"Exif": {
			piexif.ExifIFD.DateTimeOriginal: b"2023:05:15 14:30:45",
			piexif.ExifIFD.DateTimeDigitized: b"2022:02:02 02:02:02",
		},
	}
	assert extract_capture_timestamp(doc) == datetime(2023, 5, 15, 14, 30, 45)


def test_capture_timestamp_falls_back_in_order() -> None:
	digitized = {
		"0th": {piexif.ImageIFD.DateTime: b"2021:01:01 00:00:00"},
		"Exif": {piexif.ExifIFD.DateTimeDigitized: b"2022:02:02 02:02:02"},
	}
	assert extract_capture_timestamp(digitized) == datetime(2022, 2, 2, 2, 2, 2)
	modified = {"0th": {piexif.ImageIFD.DateTime: b"2021:01:01 08:15:00"}}
	assert extract_capture_timestamp(modified) == datetime(2021, 1, 1, 8, 15)
	assert extract_capture_timestamp({"0th": {piexif.ImageIFD.Make: b"x"}}) is None
	assert extract_capture_timestamp(None) is None


def test_parse_exif_datetime() -> None:
	assert parse_exif_datetime("2023:05:15 14:30:45") == datetime(2023, 5, 15, 14, 30, 45)
	assert parse_exif_datetime(b"2023:05:15 14:30:45\x00") == datetime(2023, 5, 15, 14, 30, 45)
	assert parse_exif_datetime("not-a-date") is None
	assert parse_exif_datetime("2023:13:45 99:99:99") is None
	assert parse_exif_datetime("0000:00:00 00:00:00") is None
	assert parse_exif_datetime("") is None


def test_malformed_original_does_not_fall_through() -> None:
	doc = {
		"0th": {piexif.ImageIFD.DateTime: b"2021:01:01 00:00:00"},
		"Exif": {piexif.ExifIFD.DateTimeOriginal: b"not-a-date"},
	}
	assert extract_capture_timestamp(doc) is None


def test_extract_gps_block() -> None:
	gps = {piexif.GPSIFD.GPSLatitudeRef: b"N", piexif.GPSIFD.GPSLatitude: ((35, 1), (40, 1), (0, 1))}
	assert extract_gps_block({"GPS": gps}) == gps
	assert extract_gps_block({"GPS": {}}) is None
	assert extract_gps_block({"0th": {1: 1}}) is None
	assert extract_gps_block(None) is None


def test_extract_exif_details() -> None:
	doc = {
		"Exif": {piexif.ExifIFD.DateTimeOriginal: b"2023:05:15 14:30:45"},
		"GPS": {piexif.GPSIFD.GPSLatitudeRef: b"N"},
	}
	when, gps = extract_exif_details(doc)
	assert when == datetime(2023, 5, 15, 14, 30, 45)
	assert gps == {piexif.GPSIFD.GPSLatitudeRef: b"N"}
	assert extract_exif_details(None) == (None, None)


def test_describe_exif_sections() -> None:
	doc = {
		"0th": {piexif.ImageIFD.Orientation: 6, piexif.ImageIFD.Make: b"Canon"},
		"GPS": {piexif.GPSIFD.GPSLatitude: ((35, 1), (40, 1), (0, 1))},
		"thumbnail": b"abc",
	}
	text = describe_exif(doc)
	assert text.startswith(EXIF_DUMP_HEADER)
	assert "0th IFD:" in text
	assert "GPS IFD:" in text
	assert "Exif IFD:" not in text
	assert '"274": 6' in text
	assert '"271": "Canon"' in text
	assert text.rstrip().endswith("Thumbnail: Present (length 3)")


def test_describe_exif_without_thumbnail() -> None:
	assert describe_exif({"Exif": {1: b"x"}}).rstrip().endswith("Thumbnail: Not present")
