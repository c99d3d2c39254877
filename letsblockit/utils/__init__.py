"""Maintenance helpers for the data folders: icons, asset hashes, avatars and presets."""