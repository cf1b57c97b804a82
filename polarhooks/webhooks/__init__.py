"""Webhook ingestion: handler contract, dispatcher and the inbound pipeline."""
