"""Presets subpackage: snapshot, store and reconcile component configurations.

This package provides:
    - model: Setting, Config and Preset entities and their serialization
    - matcher: subset matching of stored configs against live state
    - keybind: key combination index used to cycle presets
    - storage: one-file-per-preset persistence of the preset collection
    - codec: portable text export and import of a single preset
    - editor: incremental editing of one preset
    - host: the adapter interface to the process owning the live components
    - legacy: conversion of presets saved in the old format
    - lib: PresetsAPI, the single owner of the preset collection
"""
