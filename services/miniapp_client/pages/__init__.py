"""Page controllers for the mini program client."""

from services.miniapp_client.pages.auth_redirect import AuthRedirector
from services.miniapp_client.pages.community_page import CommunityPage
from services.miniapp_client.pages.detail_page import DetailPage
from services.miniapp_client.pages.my_posts_page import MyPostsPage
from services.miniapp_client.pages.post_page import PostPage
from services.miniapp_client.pages.profile_page import ProfilePage

__all__ = [
    "AuthRedirector",
    "CommunityPage",
    "DetailPage",
    "MyPostsPage",
    "PostPage",
    "ProfilePage",
]
