"""API subpackage - HTTP surface for the item value engine."""
