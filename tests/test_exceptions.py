"""Tests for the exception hierarchy."""

from whatschanging.exceptions import (
    ChannelLayoutMismatch,
    ConfigurationException,
    DiffException,
    DimensionMismatch,
    ImageLoadError,
    InvalidConfigurationException,
    InvalidImageException,
    RowstrideMismatch,
    WhatschangingException,
)


def test_str_includes_error_code():
    error = DimensionMismatch((10, 10), (12, 10))

    assert str(error) == (
        "[DIMENSION_MISMATCH] Images of different sizes cannot be compared: 10x10 vs 12x10"
    )


def test_base_exception_without_code():
    error = WhatschangingException("plain")

    assert str(error) == "plain"
    assert error.context == {}


def test_hierarchy():
    assert issubclass(DimensionMismatch, DiffException)
    assert issubclass(ChannelLayoutMismatch, DimensionMismatch)
    assert issubclass(RowstrideMismatch, DimensionMismatch)
    assert issubclass(InvalidImageException, DiffException)
    assert issubclass(ImageLoadError, DiffException)
    assert issubclass(DiffException, WhatschangingException)
    assert issubclass(InvalidConfigurationException, ConfigurationException)
    assert issubclass(ConfigurationException, WhatschangingException)


def test_channel_layout_context():
    error = ChannelLayoutMismatch((4, 4), 3, 4)

    assert error.error_code == "CHANNEL_LAYOUT_MISMATCH"
    assert error.context["first_channels"] == 3
    assert "3 channels vs 4 channels" in error.message


def test_image_load_error():
    error = ImageLoadError("a.png", "file not found")

    assert error.message == "Failed to load image 'a.png': file not found"
    assert error.context["image_path"] == "a.png"


def test_invalid_configuration():
    error = InvalidConfigurationException("workers", "must be positive")

    assert str(error) == "[INVALID_CONFIG] Invalid configuration for 'workers': must be positive"


def test_same_size_mismatch_names_the_reason():
    channels = ChannelLayoutMismatch((2, 1), 3, 4)
    rowstride = RowstrideMismatch((2, 1), 8, 12)
    length = DimensionMismatch((2, 1), (2, 1), reason="6 bytes vs 8 bytes")

    assert channels.message == (
        "Images of the same size (2x1) cannot be compared: 3 channels vs 4 channels"
    )
    assert rowstride.message == (
        "Images of the same size (2x1) cannot be compared: rowstride 8 vs 12"
    )
    assert "different sizes" not in length.message
