"""Place-name gazetteer and coordinate resolution - Pure functions.

Feeds identify places by Japanese name only (hypocenter regions, target
areas, station addresses). This module maps those names to approximate
coordinates using a static table.

Lookup order is exact match, then keys the name starts with, then keys
contained anywhere in the name. Within each tier the first key in table
order wins, so more specific names are listed before the prefecture they
belong to.
"""

from collections.abc import Iterable, Mapping

from src.core.geo import Coordinate


# name -> (latitude, longitude)
GAZETTEER: dict[str, tuple[float, float]] = {
    # Hypocenter regions (specific names first)
    "石川県能登地方": (37.30, 136.90),
    "能登半島沖": (37.50, 137.20),
    "北海道胆振地方中東部": (42.70, 142.00),
    "釧路沖": (42.50, 144.60),
    "十勝沖": (42.00, 143.80),
    "根室半島南東沖": (43.00, 146.00),
    "青森県東方沖": (40.90, 142.50),
    "岩手県沖": (39.60, 142.40),
    "三陸沖": (38.90, 143.50),
    "宮城県沖": (38.30, 141.90),
    "福島県沖": (37.40, 141.60),
    "茨城県沖": (36.40, 141.20),
    "茨城県南部": (36.10, 140.10),
    "千葉県東方沖": (35.50, 140.90),
    "千葉県北西部": (35.70, 140.10),
    "東京湾": (35.50, 139.80),
    "相模湾": (35.10, 139.40),
    "伊豆大島近海": (34.80, 139.30),
    "駿河湾": (34.80, 138.50),
    "遠州灘": (34.50, 137.80),
    "紀伊半島沖": (33.40, 136.00),
    "和歌山県北部": (34.23, 135.17),
    "和歌山県南方沖": (33.20, 135.50),
    "紀伊水道": (33.90, 134.90),
    "大阪府北部": (34.84, 135.62),
    "京都府南部": (34.90, 135.70),
    "奈良県北部": (34.60, 135.85),
    "兵庫県南東部": (34.70, 135.20),
    "伊予灘": (33.80, 132.20),
    "豊後水道": (33.10, 132.20),
    "日向灘": (32.00, 131.90),
    "熊本県熊本地方": (32.80, 130.80),
    "熊本県阿蘇地方": (32.90, 131.10),
    "大隅半島東方沖": (31.30, 131.50),
    "トカラ列島近海": (29.50, 129.70),
    "沖縄本島近海": (26.50, 128.00),
    "与那国島近海": (24.40, 122.90),
    "長野県中部": (36.20, 138.00),
    "岐阜県飛騨地方": (36.10, 137.20),
    "新潟県中越地方": (37.30, 138.90),
    "新潟県上中越沖": (37.60, 138.50),
    "鳥取県中部": (35.40, 133.80),
    "島根県西部": (34.90, 132.10),
    # Cities and stations
    "札幌市": (43.06, 141.35),
    "釧路市": (42.98, 144.38),
    "青森市": (40.82, 140.74),
    "盛岡市": (39.70, 141.15),
    "仙台市": (38.27, 140.87),
    "秋田市": (39.72, 140.10),
    "山形市": (38.24, 140.36),
    "福島市": (37.75, 140.47),
    "いわき市": (37.05, 140.89),
    "水戸市": (36.34, 140.45),
    "宇都宮市": (36.56, 139.88),
    "前橋市": (36.39, 139.06),
    "さいたま市": (35.86, 139.65),
    "千葉市": (35.61, 140.12),
    "横浜市": (35.44, 139.64),
    "新潟市": (37.90, 139.02),
    "富山市": (36.70, 137.21),
    "金沢市": (36.59, 136.63),
    "輪島市": (37.39, 136.90),
    "珠洲市": (37.44, 137.26),
    "七尾市": (37.04, 136.97),
    "福井市": (36.07, 136.22),
    "甲府市": (35.66, 138.57),
    "長野市": (36.65, 138.18),
    "岐阜市": (35.42, 136.76),
    "静岡市": (34.98, 138.38),
    "名古屋市": (35.18, 136.91),
    "津市": (34.73, 136.51),
    "大津市": (35.00, 135.87),
    "京都市": (35.01, 135.77),
    "大阪市": (34.69, 135.50),
    "神戸市": (34.69, 135.18),
    "奈良市": (34.69, 135.80),
    "和歌山市": (34.23, 135.17),
    "鳥取市": (35.50, 134.24),
    "松江市": (35.47, 133.05),
    "岡山市": (34.66, 133.93),
    "広島市": (34.40, 132.46),
    "山口市": (34.19, 131.47),
    "徳島市": (34.07, 134.56),
    "高松市": (34.34, 134.04),
    "松山市": (33.84, 132.77),
    "高知市": (33.56, 133.53),
    "福岡市": (33.61, 130.42),
    "佐賀市": (33.25, 130.30),
    "長崎市": (32.74, 129.87),
    "熊本市": (32.79, 130.74),
    "大分市": (33.24, 131.61),
    "宮崎市": (31.91, 131.42),
    "鹿児島市": (31.56, 130.56),
    "那覇市": (26.21, 127.68),
    # Prefectures (capital coordinates)
    "北海道": (43.06, 141.35),
    "青森県": (40.82, 140.74),
    "岩手県": (39.70, 141.15),
    "宮城県": (38.27, 140.87),
    "秋田県": (39.72, 140.10),
    "山形県": (38.24, 140.36),
    "福島県": (37.75, 140.47),
    "茨城県": (36.34, 140.45),
    "栃木県": (36.56, 139.88),
    "群馬県": (36.39, 139.06),
    "埼玉県": (35.86, 139.65),
    "千葉県": (35.61, 140.12),
    "東京都": (35.69, 139.69),
    "神奈川県": (35.45, 139.64),
    "新潟県": (37.90, 139.02),
    "富山県": (36.70, 137.21),
    "石川県": (36.59, 136.63),
    "福井県": (36.07, 136.22),
    "山梨県": (35.66, 138.57),
    "長野県": (36.65, 138.18),
    "岐阜県": (35.42, 136.76),
    "静岡県": (34.98, 138.38),
    "愛知県": (35.18, 136.91),
    "三重県": (34.73, 136.51),
    "滋賀県": (35.00, 135.87),
    "京都府": (35.02, 135.76),
    "大阪府": (34.69, 135.52),
    "兵庫県": (34.69, 135.18),
    "奈良県": (34.69, 135.80),
    "和歌山県": (34.23, 135.17),
    "鳥取県": (35.50, 134.24),
    "島根県": (35.47, 133.05),
    "岡山県": (34.66, 133.93),
    "広島県": (34.40, 132.46),
    "山口県": (34.19, 131.47),
    "徳島県": (34.07, 134.56),
    "香川県": (34.34, 134.04),
    "愛媛県": (33.84, 132.77),
    "高知県": (33.56, 133.53),
    "福岡県": (33.61, 130.42),
    "佐賀県": (33.25, 130.30),
    "長崎県": (32.74, 129.87),
    "熊本県": (32.79, 130.74),
    "大分県": (33.24, 131.61),
    "宮崎県": (31.91, 131.42),
    "鹿児島県": (31.56, 130.56),
    "沖縄県": (26.21, 127.68),
}


def find_gazetteer_key(
    name: str,
    gazetteer: Mapping[str, tuple[float, float]] = GAZETTEER,
) -> str | None:
    """Find the gazetteer key that best matches a place name.

    Pure function. Exact match, then prefix, then substring; first key in
    table order wins within a tier. No case or whitespace normalization.

    Args:
        name: Place name from a feed
        gazetteer: Name -> (lat, lon) table

    Returns:
        Matching key, or None if nothing matches
    """
    if not name:
        return None

    if name in gazetteer:
        return name

    for key in gazetteer:
        if name.startswith(key):
            return key

    # NOTE: several keys can be contained in one name; table order decides.
    for key in gazetteer:
        if key in name:
            return key

    return None


def resolve_coordinate(
    name: str,
    gazetteer: Mapping[str, tuple[float, float]] = GAZETTEER,
) -> Coordinate | None:
    """Resolve a place name to an approximate coordinate.

    Pure function. A None result is a soft failure: callers skip the point.
    """
    key = find_gazetteer_key(name, gazetteer)
    if key is None:
        return None
    latitude, longitude = gazetteer[key]
    return Coordinate(latitude, longitude)


def resolve_all(
    names: Iterable[str],
    gazetteer: Mapping[str, tuple[float, float]] = GAZETTEER,
) -> list[Coordinate]:
    """Resolve many names, keeping order and skipping unresolvable ones.

    Pure function.
    """
    coordinates = []
    for name in names:
        coordinate = resolve_coordinate(name, gazetteer)
        if coordinate is not None:
            coordinates.append(coordinate)
    return coordinates
