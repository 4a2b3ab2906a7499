"""
Record schema and map-embed constants for doctor recommendations.

The map checks are plain substring tests against the iframe markup Gemini
returns; see doctor_finder/services/normalizer.py.
"""

# Every key a recommendation may carry, in display order
RECOMMENDATION_FIELDS = (
    'name',
    'specialty',
    'address',
    'phone',
    'rating',
    'opening_hours',
    'website',
    'map_iframe',
    'additional_notes',
)

# Keys whose absence flags the record (rating, website, notes are optional)
REQUIRED_RECOMMENDATION_FIELDS = (
    'name',
    'specialty',
    'address',
    'phone',
    'opening_hours',
    'map_iframe',
)

MAP_FIELD = 'map_iframe'

MAP_EMBED_PREFIX = "<iframe src='https://www.google.com/maps/embed"
MAP_EMBED_CLOSING_TAG = '</iframe>'

# Query parameters that pin a location on the embedded map
MAP_MARKER_PARAMS = {
    '&markers=': 'Marker parameters detected.',
    '&q=': "Query parameter ('q=') detected.",
}

# Parameters that switch the embed to Street View instead of a map
MAP_STREET_VIEW_PARAMS = ('layer=streetview', 'cbll=')
