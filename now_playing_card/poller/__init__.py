"""Player poller: watches the music player and publishes snapshots."""
