"""Streamers that generate silence and sine, square, triangle and sawtooth tones."""