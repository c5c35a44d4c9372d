"""Encoding and decoding of audio in WAVE format."""