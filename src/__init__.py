"""
GEO Strategist

A small content-strategy service that:
1. Researches a website and its organic competitors with Claude (web search)
2. Normalizes the returned competitive analysis into structured records
3. Surfaces content-gap opportunities for a dashboard
4. Drafts GEO-optimized articles for a chosen opportunity
"""

__version__ = "0.1.0"
