"""
ESPN numeric team ids to NFL abbreviations.

Abbreviations follow Sleeper's team codes so schedule rows line up with
the `team` field of the Sleeper player directory.
"""

ESPN_TEAM_ID_MAP = {
    "1": "ATL",
    "2": "BUF",
    "3": "CHI",
    "4": "CIN",
    "5": "CLE",
    "6": "DAL",
    "7": "DEN",
    "8": "DET",
    "9": "GB",
    "10": "TEN",
    "11": "IND",
    "12": "KC",
    "13": "LV",
    "14": "LAR",
    "15": "MIA",
    "16": "MIN",
    "17": "NE",
    "18": "NO",
    "19": "NYG",
    "20": "NYJ",
    "21": "PHI",
    "22": "ARI",
    "23": "PIT",
    "24": "LAC",
    "25": "SF",
    "26": "SEA",
    "27": "TB",
    "28": "WAS",
    "29": "CAR",
    "30": "JAX",
    # 31 and 32 are unassigned
    "33": "BAL",
    "34": "HOU",
}


def espn_team_abbr(team_id) -> str:
    """Abbreviation for an ESPN team id, or "" when the id is unknown"""
    return ESPN_TEAM_ID_MAP.get(str(team_id), "")
