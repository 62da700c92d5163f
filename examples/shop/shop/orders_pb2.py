# Generated by the protocol buffer compiler.  DO NOT EDIT!
# source: orders.proto


def _build_descriptors():
    return {}
