from .user import User
from .durood import DailyRanking, DuroodEntry, TotalCounter
from .user_level import PointsTransaction, UserLevel
from .goals import DailySpin, GoalTimerSession
from .prayer import PRAYER_NAMES, PrayerCompletion
from .password_reset import PasswordReset
from .achievement import UserAchievement
from .dua import Dua, DuaFavorite
