"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- No HubSpot sandbox token is available
- We want to run the landing end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients (DealsClient).
- Mock clients should return data shaped according to src/integrations/contracts/*

Switching to real:
Set INTEGRATIONS_MODE=real (the default) and HUBSPOT_ACCESS_TOKEN; the client
is selected in src/api/main.py.
"""
