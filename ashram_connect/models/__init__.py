from ashram_connect.models.ashram import Ashram, AshramAdmin
from ashram_connect.models.user import User, Profile, UserRole, AppRole
from ashram_connect.models.need import ChildrenNeed, NeedCategory, NeedUrgency
from ashram_connect.models.donation import Donation, DonationType, PaymentMethod, PaymentStatus
from ashram_connect.models.donor_visit import DonorVisit, VisitStatus, TIME_SLOTS
from ashram_connect.models.item_donation import ItemDonation, ItemDonationStatus
from ashram_connect.models.event import Event
from ashram_connect.models.feed import FeedPost, PostLike, PostComment
from ashram_connect.models.vendor import Vendor, VendorCategory, Product, Order, OrderStatus
from ashram_connect.models.contact_message import ContactMessage, InquiryType
