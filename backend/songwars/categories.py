"""Fixed battle category taxonomy, keyed by genre."""
from typing import Dict, List

FALLBACK_GENRE = 'rap'

CATEGORIES: Dict[str, List[dict]] = {
    'rap': [
        {'id': 'best_2000s_rap', 'title': 'Best 2000s Rap Song', 'description': 'Pick the greatest rap song from 2000-2009'},
        {'id': 'most_toxic_lyrics', 'title': 'Most Toxic Lyrics', 'description': 'The pettiest, most savage lyrics ever written'},
        {'id': 'no_skip_album', 'title': 'Song from No-Skip Album', 'description': 'Pick any song from an album with zero skips'},
        {'id': 'best_feature', 'title': 'Best Feature Verse', 'description': 'When the feature completely stole the show'},
        {'id': 'perfect_beat', 'title': 'Perfect Beat', 'description': 'The beat that makes you move involuntarily'},
        {'id': 'best_diss_track', 'title': 'Ultimate Diss Track', 'description': 'The most devastating diss in rap history'},
        {'id': 'comeback_anthem', 'title': 'Comeback Anthem', 'description': "The song that proves they're back on top"},
        {'id': 'underrated_gem', 'title': 'Underrated Gem', 'description': 'The song that deserves way more recognition'},
    ],
    'pop': [
        {'id': 'guilty_pleasure', 'title': 'Guilty Pleasure', 'description': "The pop song you secretly love but won't admit"},
        {'id': 'best_breakup_song', 'title': 'Best Breakup Song', 'description': 'The song that gets you through heartbreak'},
        {'id': 'dance_floor_filler', 'title': 'Dance Floor Filler', 'description': 'Guaranteed to get everyone moving'},
        {'id': 'road_trip_banger', 'title': 'Road Trip Banger', 'description': 'Windows down, volume up vibes'},
        {'id': 'shower_song', 'title': 'Shower Song', 'description': 'The song you belt out in the shower'},
        {'id': 'throwback_thursday', 'title': 'Throwback Thursday', 'description': 'Takes you right back to the good old days'},
    ],
    'rock': [
        {'id': 'best_guitar_solo', 'title': 'Best Guitar Solo', 'description': 'The solo that gives you goosebumps every time'},
        {'id': 'workout_motivation', 'title': 'Workout Motivation', 'description': 'Gets you pumped to lift heavy things'},
        {'id': 'concert_opener', 'title': 'Perfect Concert Opener', 'description': 'The song that would get the crowd hyped'},
        {'id': 'driving_at_night', 'title': 'Driving at Night', 'description': 'Perfect soundtrack for late-night drives'},
    ],
    'rnb': [
        {'id': 'smooth_vibes', 'title': 'Smoothest Vibes', 'description': "The song that's pure silk to your ears"},
        {'id': 'love_song', 'title': 'Ultimate Love Song', 'description': 'Makes you believe in romance again'},
        {'id': '90s_rnb_classic', 'title': '90s R&B Classic', 'description': 'From the golden era of R&B'},
    ],
}


def categories_for(genre: str) -> List[dict]:
    """Categories for a genre, falling back when the genre is unknown or empty."""
    return CATEGORIES.get(genre) or CATEGORIES[FALLBACK_GENRE]
