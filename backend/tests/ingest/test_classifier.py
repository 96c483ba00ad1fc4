import pytest

from images.models import MaskType
from ingest.classifier import (
    MASK_MARKERS,
    Classification,
    FileKind,
    classify,
    derive_image_filename,
)
from ingest.errors import AmbiguousOriginError


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("occlusion_colored_video_0000_1383.jpg", MaskType.OCCLUSION),
        ("saliency_colored_video_0000_1383.jpg", MaskType.SALIENCY),
        ("layer_gradcam_colored_video_0000_1383.jpg", MaskType.LAYER_GRADCAM),
        ("integrated_gradients_colored_video_0000_1383.jpg", MaskType.INTEGRATED_GRADIENTS),
        ("guided_gradcam_colored_video_0000_1383.jpg", MaskType.GUIDED_GRADCAM),
        ("gradient_shap_colored_video_0000_1383.jpg", MaskType.GRADIENT_SHAP),
    ],
)
def test_classify_mask_types(filename, expected):
    assert classify(filename) == Classification(FileKind.MASK, expected)


def test_classify_original_frame():
    result = classify("video_0000_1383.jpg")
    assert result.kind is FileKind.ORIGINAL
    assert result.mask_type is None
    assert result.is_original


@pytest.mark.parametrize("filename", ["notes.txt", ".DS_Store", "frame_0001.jpg", ""])
def test_classify_unrecognized(filename):
    assert classify(filename).kind is FileKind.UNRECOGNIZED


def test_original_prefix_takes_priority_over_markers():
    # Starts with video_ so it is an original even though a marker is embedded
    assert classify("video_saliency_colored_0001.jpg").kind is FileKind.ORIGINAL


def test_first_marker_in_table_order_wins():
    filename = "gradient_shap_colored_occlusion_colored_video_0001.jpg"
    assert classify(filename).mask_type is MaskType.OCCLUSION


def test_marker_table_covers_every_mask_type_once():
    assert [mask_type for _, mask_type in MASK_MARKERS] == list(MaskType)


def test_substring_match_is_not_anchored():
    assert classify("patient7_layer_gradcam_colored_video_0001.png").mask_type is MaskType.LAYER_GRADCAM


def test_derive_image_filename_strips_algorithm_prefix():
    assert derive_image_filename("saliency_colored_video_0042_0007.jpg") == "video_0042_0007.jpg"
    assert derive_image_filename("integrated_gradients_colored_video_0000_1383.png") == "video_0000_1383.png"


def test_derive_image_filename_uses_first_video_marker():
    assert derive_image_filename("occlusion_colored_video_video_01.jpg") == "video_video_01.jpg"


def test_derive_image_filename_without_video_marker_is_ambiguous():
    with pytest.raises(AmbiguousOriginError) as excinfo:
        derive_image_filename("occlusion_colored_frame_0001.jpg")
    assert excinfo.value.filename == "occlusion_colored_frame_0001.jpg"
