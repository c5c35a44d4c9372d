"""Effects on streamers: gain, pan, volume, mono, swap, transitions, Doppler and equalizer."""