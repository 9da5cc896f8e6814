from doctransform.encoding.encoder import FormatEncoder, FormatEncoderFactory

__all__ = ["FormatEncoder", "FormatEncoderFactory"]
