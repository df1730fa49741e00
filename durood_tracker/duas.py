# durood_tracker/duas.py
"""
Dua library and per-user favorites. Nothing here commits.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from . import db
from .errors import NotFoundError, ValidationError
from .models.dua import Dua, DuaFavorite

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "category", "arabic", "urdu", "english")

SEED_DUAS = (
    {
        "title": "Morning Dua",
        "category": "morning",
        "arabic": "اللَّهُمَّ إِنِّي أَصْبَحْتُ أُشْهِدُكَ وَأُشْهِدُ حَمَلَةَ عَرْشِكَ وَمَلَائِكَتَكَ وَجَمِيعَ خَلْقِكَ أَنَّكَ أَنْتَ اللَّهُ لَا إِلَهَ إِلَّا أَنْتَ وَحْدَكَ لَا شَرِيكَ لَكَ وَأَنَّ مُحَمَّدًا عَبْدُكَ وَرَسُولُكَ",
        "urdu": "اے اللہ! میں نے صبح کی اور میں گواہی دیتا ہوں تجھے اور تیرے عرش کو اٹھانے والوں اور تیرے فرشتوں اور تیری تمام مخلوق کو گواہی دیتا ہوں کہ تو ہی اللہ ہے، تیرے سوا کوئی معبود نہیں، تو اکیلا ہے، تیرے لیے کوئی شریک نہیں اور محمد تیرا بندہ اور تیرا رسول ہے",
        "english": "O Allah, I have entered the morning and I bear witness to You, and I bear witness to the carriers of Your Throne, and Your angels, and all Your creation, that You are Allah, there is no god but You alone, You have no partner, and Muhammad is Your servant and Your Messenger.",
        "transliteration": "Allahumma inni asbahtu ush-hiduka wa ush-hidu hamalata 'arshika wa mala'ikataka wa jami'a khalqika annaka antallah la ilaha illa anta wahdaka la sharika laka wa anna Muhammadan 'abduka wa rasuluka",
        "reference": "Sahih Muslim 2723",
        "order": 1,
    },
    {
        "title": "Evening Dua",
        "category": "evening",
        "arabic": "اللَّهُمَّ إِنِّي أَمْسَيْتُ أُشْهِدُكَ وَأُشْهِدُ حَمَلَةَ عَرْشِكَ وَمَلَائِكَتَكَ وَجَمِيعَ خَلْقِكَ أَنَّكَ أَنْتَ اللَّهُ لَا إِلَهَ إِلَّا أَنْتَ وَحْدَكَ لَا شَرِيكَ لَكَ وَأَنَّ مُحَمَّدًا عَبْدُكَ وَرَسُولُكَ",
        "urdu": "اے اللہ! میں نے شام کی اور میں گواہی دیتا ہوں تجھے اور تیرے عرش کو اٹھانے والوں اور تیرے فرشتوں اور تیری تمام مخلوق کو گواہی دیتا ہوں کہ تو ہی اللہ ہے، تیرے سوا کوئی معبود نہیں، تو اکیلا ہے، تیرے لیے کوئی شریک نہیں اور محمد تیرا بندہ اور تیرا رسول ہے",
        "english": "O Allah, I have entered the evening and I bear witness to You, and I bear witness to the carriers of Your Throne, and Your angels, and all Your creation, that You are Allah, there is no god but You alone, You have no partner, and Muhammad is Your servant and Your Messenger.",
        "transliteration": "Allahumma inni amsaytu ush-hiduka wa ush-hidu hamalata 'arshika wa mala'ikataka wa jami'a khalqika annaka antallah la ilaha illa anta wahdaka la sharika laka wa anna Muhammadan 'abduka wa rasuluka",
        "reference": "Sahih Muslim 2723",
        "order": 2,
    },
    {
        "title": "Travel Dua",
        "category": "travel",
        "arabic": "سُبْحَانَ الَّذِي سَخَّرَ لَنَا هَذَا وَمَا كُنَّا لَهُ مُقْرِنِينَ وَإِنَّا إِلَى رَبِّنَا لَمُنْقَلِبُونَ",
        "urdu": "پاک ہے وہ ذات جس نے ہمارے لیے یہ (سواری) مسخر کر دی اور ہم خود اس کے قابو میں نہیں تھے اور ہم اپنے رب کی طرف لوٹنے والے ہیں",
        "english": "Glory be to Him who has subjected this to us, and we were not able to do it. And indeed, to our Lord we will return.",
        "transliteration": "Subhana alladhi sakhkhara lana hadha wa ma kunna lahu muqrinin wa inna ila rabbina lamunqalibun",
        "reference": "Surah Az-Zukhruf (43:13-14)",
        "order": 3,
    },
    {
        "title": "Protection from Evil",
        "category": "protection",
        "arabic": "أَعُوذُ بِكَلِمَاتِ اللَّهِ التَّامَّاتِ مِنْ شَرِّ مَا خَلَقَ",
        "urdu": "میں اللہ کی مکمل باتوں کی پناہ چاہتا ہوں اس چیز کی برائی سے جسے اس نے پیدا کیا",
        "english": "I seek refuge in the perfect words of Allah from the evil of what He has created.",
        "transliteration": "A'udhu bikalimatillahi at-tammati min sharri ma khalaq",
        "reference": "Sahih Muslim 2708",
        "order": 4,
    },
    {
        "title": "Forgiveness Dua",
        "category": "forgiveness",
        "arabic": "رَبِّ اغْفِرْ لِي وَتُبْ عَلَيَّ إِنَّكَ أَنْتَ التَّوَّابُ الرَّحِيمُ",
        "urdu": "اے میرے رب! مجھے بخش دے اور مجھے توبہ قبول فرما بیشک تو توبہ قبول کرنے والا اور رحم کرنے والا ہے",
        "english": "My Lord, forgive me and accept my repentance. Indeed, You are the Accepting of Repentance, the Merciful.",
        "transliteration": "Rabbi ighfir li wa tub 'alayya innaka antat tawwabu rahim",
        "reference": "Surah Al-Mu'minun (23:118)",
        "order": 5,
    },
)


def list_duas(category: Optional[str] = None) -> List[Dua]:
    query = Dua.query.filter_by(is_active=True)
    if category:
        query = query.filter_by(category=category.strip().lower())
    return query.order_by(Dua.category.asc(), Dua.display_order.asc(), Dua.id.asc()).all()


def _text(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip() or None


def create_dua(data: Dict[str, Any]) -> Dua:
    missing = [f for f in REQUIRED_FIELDS if not _text(data, f)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    order = data.get("order", 0)
    if isinstance(order, bool) or not isinstance(order, int):
        raise ValidationError("order must be an integer")

    dua = Dua(
        title=_text(data, "title"),
        category=_text(data, "category").lower(),
        arabic=_text(data, "arabic"),
        urdu=_text(data, "urdu"),
        english=_text(data, "english"),
        transliteration=_text(data, "transliteration"),
        reference=_text(data, "reference"),
        audio_url=_text(data, "audio_url") or _text(data, "audioUrl"),
        display_order=order,
    )
    db.session.add(dua)
    db.session.flush()
    return dua


def seed_duas() -> int:
    """Add the built-in collection, skipping titles already present."""
    existing = {title for (title,) in db.session.query(Dua.title).all()}
    created = 0
    for item in SEED_DUAS:
        if item["title"] in existing:
            continue
        create_dua(item)
        created += 1
    logger.info("Seeded %s duas", created)
    return created


def _active_dua(dua_id: int) -> Dua:
    dua = db.session.get(Dua, dua_id)
    if dua is None or not dua.is_active:
        raise NotFoundError("Dua not found")
    return dua


def list_favorites(user_id: int) -> List[DuaFavorite]:
    return (
        DuaFavorite.query.filter_by(user_id=user_id)
        .order_by(DuaFavorite.created_at.desc(), DuaFavorite.id.desc())
        .all()
    )


def add_favorite(user_id: int, dua_id: int) -> Tuple[DuaFavorite, bool]:
    """Returns (favorite, created). Favoriting twice is a no-op."""
    _active_dua(dua_id)

    fav = DuaFavorite.query.filter_by(user_id=user_id, dua_id=dua_id).first()
    if fav is not None:
        return fav, False

    fav = DuaFavorite(user_id=user_id, dua_id=dua_id)
    try:
        with db.session.begin_nested():
            db.session.add(fav)
    except IntegrityError:
        return DuaFavorite.query.filter_by(user_id=user_id, dua_id=dua_id).one(), False
    return fav, True


def remove_favorite(user_id: int, dua_id: int) -> None:
    fav = DuaFavorite.query.filter_by(user_id=user_id, dua_id=dua_id).first()
    if fav is None:
        raise NotFoundError("Favorite not found")
    db.session.delete(fav)
    db.session.flush()
