from schoolsite.models.user import User
from schoolsite.models.user_activity import UserActivity
from schoolsite.models.article import Article, Category
from schoolsite.models.major import Major
from schoolsite.models.extracurricular import Extracurricular
from schoolsite.models.achievement import Achievement
from schoolsite.models.banner import Banner
from schoolsite.models.gallery import Gallery, GalleryImage
from schoolsite.models.employee import Employee
from schoolsite.models.facility import Facility
from schoolsite.models.school_profile import SchoolProfile, ProfileType
from schoolsite.models.setting import Setting
