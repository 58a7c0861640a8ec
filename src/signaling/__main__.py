from signaling.main import main

main()
