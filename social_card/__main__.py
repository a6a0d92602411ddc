from social_card.main import main

main()
