"""
Contracts (data models).

This folder defines the shapes exchanged with the CRM integration:
- the DealRecord returned by every deals client
- the lookup modes (external deal UUID, internal HubSpot id)
- the named fallback records

Why this exists:
- Ensures mock and real clients return the same structure
- Keeps fallback values in one place instead of scattered literals

Both mock and real HTTP clients should use these contracts.
"""
