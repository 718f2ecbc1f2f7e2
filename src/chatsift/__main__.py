from chatsift.cli import main

main()
