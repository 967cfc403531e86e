# Services package.
#
#   post_service      - PostService, keeps the posts table and the blob
#                       store consistent and returns a Result per operation
#   follower_service  - directed follow edges that drive the feed
#   user_service      - CRUD for User
#
# follower_service and user_service are plain async functions taking an
# AsyncSession first; the router controls their transaction via ``get_db``.
# PostService commits through PostRepository because its result depends on
# the commit outcome.
