from .codec import CsvCodec, build_codec, load_codec

__version__ = "0.1.0"

__all__ = ["CsvCodec", "build_codec", "load_codec"]
